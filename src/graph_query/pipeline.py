"""Filter/project pipeline applying a View to a stream of elements.

Each element is checked, in order, for:

1. group membership in the view
2. directed type (edges only)
3. the group's pre-aggregation filter
4. visibility against the caller's authorisations
5. property projection (allow-list or deny-list)
6. the group's post-transform filter

The pipeline is a lazy generator: elements are pulled from upstream and
yielded one at a time, in arrival order.

Public API:
    OnError: What to do when an element cannot be evaluated.
    filter_elements: Apply a view to an element stream.
    ElementPipeline: Reusable, validated pipeline configuration.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator

from .elements import DirectedType, Edge, Element
from .exceptions import ConfigurationError, EvaluationError, GraphQueryError
from .view import View, ViewElementDefinition
from .visibility import DEFAULT_VISIBILITY_PROPERTY, is_visible

logger = logging.getLogger(__name__)


class OnError(Enum):
    """Policy for elements whose filters raise."""

    HALT = "halt"  # Raise EvaluationError and stop the stream
    SKIP = "skip"  # Drop the element and continue


def _evaluate(
    element: Element,
    definition: ViewElementDefinition,
    directed_type: DirectedType,
    data_auths: frozenset[str],
    visibility_property: str,
) -> Element | None:
    """Run the per-element stages; None means the element is dropped."""
    if isinstance(element, Edge) and not directed_type.accepts(element.directed):
        return None

    if definition.pre_aggregation_filter is not None:
        if not definition.pre_aggregation_filter.test(element):
            return None

    if not is_visible(element, data_auths, visibility_property):
        return None

    element = definition.project(element)

    if definition.post_transform_filter is not None:
        if not definition.post_transform_filter.test(element):
            return None

    return element


def filter_elements(
    elements: Iterable[Element],
    view: View,
    directed_type: DirectedType = DirectedType.EITHER,
    data_auths: Iterable[str] = (),
    on_error: OnError = OnError.HALT,
    visibility_property: str = DEFAULT_VISIBILITY_PROPERTY,
) -> Iterator[Element]:
    """Lazily yield the elements of *elements* that *view* admits.

    Args:
        elements: Upstream element source; closed on every exit path if
            it has a ``close`` method.
        view: View giving group membership, filters and projection.
        directed_type: Which edges are eligible.
        data_auths: Authorisation tokens of the caller.
        on_error: HALT raises EvaluationError on the first failing
            element; SKIP logs and drops it.
        visibility_property: Property holding visibility labels.

    Raises:
        ConfigurationError: If *view*, *directed_type*, *data_auths* or
            *on_error* is invalid. Raised by the call itself.
        EvaluationError: If an element or the upstream source fails and
            the policy is HALT. Raised by the pull that hit it.
    """
    _validate(view, directed_type, data_auths, on_error)
    return _filter(elements, view, directed_type, frozenset(data_auths), on_error, visibility_property)


def _validate(view: View, directed_type: DirectedType, data_auths: Iterable[str], on_error: OnError) -> None:
    if not isinstance(view, View):
        raise ConfigurationError("view must be a View")
    if not isinstance(directed_type, DirectedType):
        raise ConfigurationError(f"Unrecognised directed type: {directed_type!r}")
    if not isinstance(on_error, OnError):
        raise ConfigurationError(f"Unrecognised error policy: {on_error!r}")
    if isinstance(data_auths, str):
        raise ConfigurationError("data_auths must be a collection of strings, not a string")


def _filter(
    elements: Iterable[Element],
    view: View,
    directed_type: DirectedType,
    auths: frozenset[str],
    on_error: OnError,
    visibility_property: str,
) -> Iterator[Element]:
    iterator = iter(elements)
    try:
        while True:
            try:
                element = next(iterator)
            except StopIteration:
                return
            except GraphQueryError:
                raise
            except Exception as e:
                raise EvaluationError(f"Upstream element source failed: {e}") from e

            definition = view.get_definition(element)
            if definition is None:
                continue

            try:
                result = _evaluate(element, definition, directed_type, auths, visibility_property)
            except Exception as e:
                if on_error is OnError.SKIP:
                    logger.warning("Skipping %s element that failed evaluation: %s", element.group, e)
                    continue
                if isinstance(e, EvaluationError):
                    raise
                raise EvaluationError(
                    f"Failed to evaluate {element.group} element: {e}"
                ) from e

            if result is not None:
                yield result
    finally:
        for source in (iterator, elements):
            close = getattr(source, "close", None)
            if callable(close):
                close()


class ElementPipeline:
    """A validated, reusable filter/project configuration.

    Example:
        pipeline = ElementPipeline(view, DirectedType.DIRECTED, {"basic"})
        for element in pipeline(store_elements):
            ...
    """

    def __init__(
        self,
        view: View,
        directed_type: DirectedType = DirectedType.EITHER,
        data_auths: Iterable[str] = (),
        on_error: OnError = OnError.HALT,
        visibility_property: str = DEFAULT_VISIBILITY_PROPERTY,
    ) -> None:
        _validate(view, directed_type, data_auths, on_error)
        self.view = view
        self.directed_type = directed_type
        self.data_auths = frozenset(data_auths)
        self.on_error = on_error
        self.visibility_property = visibility_property

    def __call__(self, elements: Iterable[Element]) -> Iterator[Element]:
        return filter_elements(
            elements,
            self.view,
            directed_type=self.directed_type,
            data_auths=self.data_auths,
            on_error=self.on_error,
            visibility_property=self.visibility_property,
        )


__all__ = ["ElementPipeline", "OnError", "filter_elements"]

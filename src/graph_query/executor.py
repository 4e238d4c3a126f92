"""Query executor: wires a store's element stream through the view pipeline.

Public API:
    GetAllElements: Query for every element a view admits.
    GetElements: Query for elements related to a set of seed vertices.
    QueryExecutor: Runs queries against an ElementStore for a User.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from .elements import DirectedType, Edge, Element, Entity, MatchedVertex
from .exceptions import ConfigurationError
from .iterables import CloseableIterable
from .pipeline import OnError, filter_elements
from .store.protocol import ElementStore
from .view import View
from .visibility import DEFAULT_VISIBILITY_PROPERTY, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetAllElements:
    """Return every stored element admitted by *view*.

    Attributes:
        view: View to apply; None means every group, unmodified.
        directed_type: Which edges are eligible.
    """

    view: View | None = None
    directed_type: DirectedType = DirectedType.EITHER

    def __post_init__(self):
        _validate_query(self)


@dataclass(frozen=True)
class GetElements:
    """Return stored elements related to any of *seeds*.

    Entities are related when their vertex is a seed; edges when either
    end is a seed.  Related edges are returned tagged with the end that
    matched (the source when both do).

    Attributes:
        seeds: Seed vertices.
        view: View to apply; None means every group, unmodified.
        directed_type: Which edges are eligible.
    """

    seeds: tuple = field(default_factory=tuple)
    view: View | None = None
    directed_type: DirectedType = DirectedType.EITHER

    def __post_init__(self):
        if isinstance(self.seeds, (str, bytes)):
            raise TypeError("seeds must be a collection of vertices, not a string")
        object.__setattr__(self, "seeds", tuple(self.seeds))
        _validate_query(self)


def _validate_query(query: Any) -> None:
    if query.view is not None and not isinstance(query.view, View):
        raise ConfigurationError("view must be a View")
    if not isinstance(query.directed_type, DirectedType):
        raise ConfigurationError(f"Unrecognised directed type: {query.directed_type!r}")


def _related(elements: Iterable[Element], seeds: frozenset) -> Iterator[Element]:
    """Yield elements touching a seed, tagging edges with the matched end."""
    for element in elements:
        if isinstance(element, Entity):
            if element.vertex in seeds:
                yield element
        elif isinstance(element, Edge):
            if element.source in seeds:
                yield element.with_matched_vertex(MatchedVertex.SOURCE)
            elif element.destination in seeds:
                yield element.with_matched_vertex(MatchedVertex.DESTINATION)


class QueryExecutor:
    """Runs element queries against a store.

    The executor only wires things together: it asks the store for a
    lazy element sequence (passing the view's groups and the directed
    type as push-down hints) and threads it through the view pipeline
    with the caller's authorisations.

    Example:
        executor = QueryExecutor(store)
        with executor.execute(GetAllElements(view), User("u", {"basic"})) as results:
            for element in results:
                ...

    Args:
        store: Source of elements.
        on_error: Error policy passed to the pipeline.
        visibility_property: Property holding visibility labels.
    """

    def __init__(
        self,
        store: ElementStore,
        on_error: OnError = OnError.HALT,
        visibility_property: str = DEFAULT_VISIBILITY_PROPERTY,
    ) -> None:
        if not isinstance(store, ElementStore):
            raise TypeError("store must implement the ElementStore protocol")
        if not isinstance(on_error, OnError):
            raise ConfigurationError(f"Unrecognised error policy: {on_error!r}")
        self.store = store
        self.on_error = on_error
        self.visibility_property = visibility_property

    def execute(
        self,
        query: GetAllElements | GetElements,
        user: User | None = None,
    ) -> CloseableIterable[Element]:
        """Run *query* for *user* and return a lazy, closable result.

        Raises:
            ConfigurationError: If *query* is not a supported query type.
        """
        if not isinstance(query, (GetAllElements, GetElements)):
            raise ConfigurationError(f"Unsupported query: {type(query).__name__}")
        user = user or User()
        view = query.view if query.view is not None else View.everything()

        if isinstance(query, GetElements) and not query.seeds:
            logger.debug("GetElements with no seeds; returning empty result")
            return CloseableIterable.empty()

        if view.is_empty:
            logger.debug("View admits no groups; returning empty result")
            return CloseableIterable.empty()

        groups = view.groups()
        source = self.store.get_all_elements(groups=groups, directed_type=query.directed_type)
        logger.debug(
            "%s on %s: groups=%s directed_type=%s",
            type(query).__name__, self.store.store_id,
            "all" if groups is None else sorted(groups), query.directed_type.value,
        )

        elements: Iterable[Element] = source
        if isinstance(query, GetElements):
            elements = _related(source, frozenset(query.seeds))

        results = filter_elements(
            elements,
            view,
            directed_type=query.directed_type,
            data_auths=user.data_auths,
            on_error=self.on_error,
            visibility_property=self.visibility_property,
        )
        return CloseableIterable(results, on_close=source.close)


__all__ = ["GetAllElements", "GetElements", "QueryExecutor"]

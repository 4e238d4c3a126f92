"""Match -- pluggable equivalence between the two sides of a join.

A Match is initialised once with the elements of one side (the indexed
side) and then queried with candidates from the other side.  Once
``init`` returns the index is never modified, so ``matching`` may be
called concurrently from several readers.

Public API:
    MatchKey: Which input collection is keyed.
    Match: Protocol all match strategies implement.
    KeyFunctionMatch: Hash-indexed match on a projected key.
    ElementMatch: KeyFunctionMatch keyed on element identifiers/properties.
    PredicateMatch: Pairwise match using an arbitrary predicate.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from ..elements import Element, IdentifierType
from ..exceptions import ConfigurationError, MatchNotInitialisedError

logger = logging.getLogger(__name__)


class MatchKey(Enum):
    """Side of a join whose elements are iterated and emitted first."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> MatchKey:
        return MatchKey.RIGHT if self is MatchKey.LEFT else MatchKey.LEFT


@runtime_checkable
class Match(Protocol):
    """Common interface for join match strategies."""

    def init(self, elements: Iterable[Any], side: MatchKey) -> None:
        """Index *elements*, which belong to *side*, for later lookups."""
        ...

    def matching(self, candidate: Any, side: MatchKey) -> list[Any]:
        """Return every indexed element equivalent to *candidate*.

        Args:
            candidate: Element from *side*.
            side: Side the candidate comes from; must differ from the
                indexed side.

        Raises:
            MatchNotInitialisedError: If ``init`` has not been called.
            ConfigurationError: If *side* is the indexed side.
        """
        ...


class _IndexedSideMixin:
    """Tracks the indexed side and validates lookups against it."""

    _side: MatchKey | None = None

    def _reset(self, side: MatchKey) -> None:
        """Validate *side* and drop any previous index state.

        Subclasses set ``_side`` only once indexing has succeeded, so a
        failed ``init`` leaves the match uninitialised.
        """
        if not isinstance(side, MatchKey):
            raise ConfigurationError(f"Unrecognised match side: {side!r}")
        self._side = None

    def _check_lookup(self, side: MatchKey) -> None:
        if self._side is None:
            raise MatchNotInitialisedError(
                f"{type(self).__name__}.matching called before init"
            )
        if not isinstance(side, MatchKey):
            raise ConfigurationError(f"Unrecognised match side: {side!r}")
        if side is self._side:
            raise ConfigurationError(
                f"Candidate side {side.value} is the indexed side; "
                f"candidates must come from the {side.opposite.value} side"
            )

    @property
    def indexed_side(self) -> MatchKey | None:
        return self._side


class KeyFunctionMatch(_IndexedSideMixin):
    """Match elements whose projected keys are equal.

    ``init`` builds a dict from key to the indexed elements sharing it,
    preserving input order, so lookups are O(1) plus the size of the
    result.  Elements whose key is None never match.

    Args:
        key_function: Maps an element to a hashable key.
        right_key_function: Optional separate key function for the right
            side; defaults to ``key_function``.
    """

    def __init__(
        self,
        key_function: Callable[[Any], Any],
        right_key_function: Callable[[Any], Any] | None = None,
    ) -> None:
        if not callable(key_function):
            raise TypeError("key_function must be callable")
        if right_key_function is not None and not callable(right_key_function):
            raise TypeError("right_key_function must be callable")
        self._left_key = key_function
        self._right_key = right_key_function or key_function
        self._index: dict[Any, tuple] = {}

    def _key_for(self, side: MatchKey) -> Callable[[Any], Any]:
        return self._left_key if side is MatchKey.LEFT else self._right_key

    def init(self, elements: Iterable[Any], side: MatchKey) -> None:
        self._reset(side)
        key_of = self._key_for(side)
        index: dict[Any, list] = defaultdict(list)
        count = 0
        for element in elements:
            count += 1
            key = key_of(element)
            if key is not None:
                index[key].append(element)
        # Freeze the buckets so lookups can hand them out safely.
        self._index = {k: tuple(v) for k, v in index.items()}
        self._side = side
        logger.debug(
            "%s indexed %d %s elements under %d keys",
            type(self).__name__, count, side.value, len(self._index),
        )

    def matching(self, candidate: Any, side: MatchKey) -> list[Any]:
        self._check_lookup(side)
        key = self._key_for(side)(candidate)
        if key is None:
            return []
        return list(self._index.get(key, ()))


class ElementMatch(KeyFunctionMatch):
    """Match elements on one or more identifiers or properties.

    Each selection key is resolved with ``Element.select``; the default
    compares vertices.  Elements whose selected values are all None do
    not match.

    Example:
        ElementMatch(IdentifierType.VERTEX)
        ElementMatch("id")
    """

    def __init__(self, *selection: IdentifierType | str) -> None:
        self.selection = tuple(selection) or (IdentifierType.VERTEX,)
        super().__init__(self._select)

    def _select(self, element: Element) -> Any:
        values = tuple(element.select(key) for key in self.selection)
        if all(v is None for v in values):
            return None
        return values[0] if len(values) == 1 else values


class PredicateMatch(_IndexedSideMixin):
    """Match using an arbitrary pairwise predicate.

    The predicate is always called as ``predicate(left, right)``
    regardless of which side is indexed, so asymmetric relations keep
    their meaning when the match key is swapped.  Lookups scan the
    indexed side in order.

    Args:
        predicate: Callable taking (left_element, right_element).
    """

    def __init__(self, predicate: Callable[[Any, Any], bool]) -> None:
        if not callable(predicate):
            raise TypeError("predicate must be callable")
        self._predicate = predicate
        self._elements: tuple = ()

    def init(self, elements: Iterable[Any], side: MatchKey) -> None:
        self._reset(side)
        self._elements = tuple(elements)
        self._side = side

    def matching(self, candidate: Any, side: MatchKey) -> list[Any]:
        self._check_lookup(side)
        if side is MatchKey.LEFT:
            return [e for e in self._elements if self._predicate(candidate, e)]
        return [e for e in self._elements if self._predicate(e, candidate)]


__all__ = ["ElementMatch", "KeyFunctionMatch", "Match", "MatchKey", "PredicateMatch"]

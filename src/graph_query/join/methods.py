"""Join methods -- combine two element collections through a Match.

All methods take the same arguments: the left and right collections, a
Match, and the MatchKey naming the keyed side.  Results are lists of
MatchedPair; a pair always holds left-side elements in ``left`` and
right-side elements in ``right`` whichever side is keyed.

Public API:
    JoinType: The closed set of join strategies.
    MatchedPair: One row of join output.
    inner_join: Keyed elements paired with each of their matches.
    outer_join: Keyed elements that have no match.
    full_join: outer(key) + inner(key) + outer(opposite key).
    join: Dispatch on JoinType.
    flatten: Yield join output as plain (left, right) tuples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator

from ..exceptions import ConfigurationError
from .match import Match, MatchKey

logger = logging.getLogger(__name__)


class JoinType(Enum):
    """Join strategy."""

    INNER = "inner"
    LEFT_OUTER = "left_outer"
    RIGHT_OUTER = "right_outer"
    FULL = "full"


@dataclass(frozen=True)
class MatchedPair:
    """A joined row; either slot is None when that side has no element."""

    left: Any = None
    right: Any = None

    def as_tuple(self) -> tuple[Any, Any]:
        return (self.left, self.right)


def _check_key(key: Any) -> MatchKey:
    if not isinstance(key, MatchKey):
        raise ConfigurationError(f"Unrecognised match key: {key!r}")
    return key


def _sides(left: list, right: list, key: MatchKey) -> tuple[list, list]:
    """Return (keyed side, other side)."""
    if key is MatchKey.LEFT:
        return left, right
    return right, left


def _pair(keyed: Any, other: Any, key: MatchKey) -> MatchedPair:
    if key is MatchKey.LEFT:
        return MatchedPair(keyed, other)
    return MatchedPair(other, keyed)


def inner_join(left: Iterable, right: Iterable, match: Match, key: MatchKey) -> list[MatchedPair]:
    """Pair each keyed element with every match on the other side.

    Output follows the keyed side's order, then the order in which
    *match* reports matches.  Duplicate matches give duplicate rows.
    """
    key = _check_key(key)
    keyed, other = _sides(list(left), list(right), key)
    match.init(other, key.opposite)

    results: list[MatchedPair] = []
    for element in keyed:
        for matched in match.matching(element, key):
            results.append(_pair(element, matched, key))

    logger.debug("inner join keyed %s: %d rows", key.value, len(results))
    return results


def outer_join(left: Iterable, right: Iterable, match: Match, key: MatchKey) -> list[MatchedPair]:
    """Return the keyed elements with no match, each paired with None.

    Matched keyed elements are not included; this is the unmatched
    remainder that ``full_join`` combines with ``inner_join``.
    """
    key = _check_key(key)
    keyed, other = _sides(list(left), list(right), key)
    match.init(other, key.opposite)

    results = [
        _pair(element, None, key)
        for element in keyed
        if not match.matching(element, key)
    ]

    logger.debug("outer join keyed %s: %d unmatched", key.value, len(results))
    return results


def full_join(left: Iterable, right: Iterable, match: Match, key: MatchKey) -> list[MatchedPair]:
    """Every element of both sides at least once.

    Output is the keyed side's unmatched remainder, then the inner join
    rows, then the other side's unmatched remainder.
    """
    key = _check_key(key)
    left = list(left)
    right = list(right)

    results = outer_join(left, right, match, key)
    results.extend(inner_join(left, right, match, key))
    results.extend(outer_join(left, right, match, key.opposite))
    return results


_DISPATCH = {
    JoinType.INNER: inner_join,
    JoinType.FULL: full_join,
}


def join(
    left: Iterable,
    right: Iterable,
    match: Match,
    key: MatchKey = MatchKey.LEFT,
    join_type: JoinType = JoinType.FULL,
) -> list[MatchedPair]:
    """Join *left* and *right* with the given strategy.

    LEFT_OUTER and RIGHT_OUTER always key on the side they name; *key*
    is still validated but does not change their output.

    Raises:
        ConfigurationError: If *key* or *join_type* is not recognised.
    """
    key = _check_key(key)
    if join_type is JoinType.LEFT_OUTER:
        return outer_join(left, right, match, MatchKey.LEFT)
    if join_type is JoinType.RIGHT_OUTER:
        return outer_join(left, right, match, MatchKey.RIGHT)
    method = _DISPATCH.get(join_type) if isinstance(join_type, JoinType) else None
    if method is None:
        raise ConfigurationError(f"Unrecognised join type: {join_type!r}")
    return method(left, right, match, key)


def flatten(pairs: Iterable[MatchedPair]) -> Iterator[tuple[Any, Any]]:
    """Yield each pair as a ``(left, right)`` tuple."""
    for pair in pairs:
        yield pair.as_tuple()


__all__ = [
    "JoinType",
    "MatchedPair",
    "flatten",
    "full_join",
    "inner_join",
    "join",
    "outer_join",
]

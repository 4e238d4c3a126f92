"""Join engine: combine two element collections with a pluggable match.

Public API:
    MatchKey: Which input collection is keyed.
    Match: Protocol all match strategies implement.
    KeyFunctionMatch: Hash-indexed match on a projected key.
    ElementMatch: Match on element identifiers or properties.
    PredicateMatch: Pairwise predicate match.
    JoinType: INNER, LEFT_OUTER, RIGHT_OUTER or FULL.
    MatchedPair: One row of join output.
    inner_join, outer_join, full_join, join, flatten: Join methods.
"""

from __future__ import annotations

from .match import ElementMatch, KeyFunctionMatch, Match, MatchKey, PredicateMatch
from .methods import (
    JoinType,
    MatchedPair,
    flatten,
    full_join,
    inner_join,
    join,
    outer_join,
)

__all__ = [
    "MatchKey",
    "Match",
    "KeyFunctionMatch",
    "ElementMatch",
    "PredicateMatch",
    "JoinType",
    "MatchedPair",
    "inner_join",
    "outer_join",
    "full_join",
    "join",
    "flatten",
]

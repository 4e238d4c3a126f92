"""graph-query-lib: joins and view-based filtering over graph elements."""

__version__ = "0.1.0"

from .config import (
    parse_directed_type,
    parse_join_type,
    parse_match_key,
    parse_on_error,
    view_from_dict,
)
from .elements import DirectedType, Edge, Element, Entity, IdentifierType, MatchedVertex
from .exceptions import (
    ConfigurationError,
    EvaluationError,
    GraphQueryError,
    MatchNotInitialisedError,
)
from .executor import GetAllElements, GetElements, QueryExecutor
from .iterables import CloseableIterable
from .join import (
    ElementMatch,
    JoinType,
    KeyFunctionMatch,
    Match,
    MatchedPair,
    MatchKey,
    PredicateMatch,
    flatten,
    full_join,
    inner_join,
    join,
    outer_join,
)
from .pipeline import ElementPipeline, OnError, filter_elements
from .predicates import (
    And,
    ElementFilter,
    Exists,
    IsEqual,
    IsIn,
    IsLessThan,
    IsMoreThan,
    Not,
    Or,
    Predicate,
)
from .store import ElementStore, InMemoryElementStore, KuzuElementStore
from .vertices import EdgeVertices, UseMatchedVertex, to_vertices
from .view import View, ViewElementDefinition
from .visibility import User, is_visible

__all__ = [
    # Elements
    "Element",
    "Entity",
    "Edge",
    "IdentifierType",
    "MatchedVertex",
    "DirectedType",
    # Join engine
    "Match",
    "MatchKey",
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
    # Views and filtering
    "View",
    "ViewElementDefinition",
    "ElementFilter",
    "Predicate",
    "IsEqual",
    "IsIn",
    "IsMoreThan",
    "IsLessThan",
    "Exists",
    "Not",
    "And",
    "Or",
    "ElementPipeline",
    "OnError",
    "filter_elements",
    # Visibility
    "User",
    "is_visible",
    # Queries and stores
    "GetAllElements",
    "GetElements",
    "QueryExecutor",
    "CloseableIterable",
    "ElementStore",
    "InMemoryElementStore",
    "KuzuElementStore",
    "EdgeVertices",
    "UseMatchedVertex",
    "to_vertices",
    # Configuration
    "parse_directed_type",
    "parse_join_type",
    "parse_match_key",
    "parse_on_error",
    "view_from_dict",
    # Exceptions
    "GraphQueryError",
    "ConfigurationError",
    "MatchNotInitialisedError",
    "EvaluationError",
]

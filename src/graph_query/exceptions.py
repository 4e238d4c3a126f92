"""Custom exceptions for graph-query-lib."""


class GraphQueryError(Exception):
    """Base exception for query and join operations."""


class ConfigurationError(GraphQueryError):
    """Raised when a view, match or join is configured inconsistently."""


class MatchNotInitialisedError(ConfigurationError):
    """Raised when a Match is queried before it has been initialised."""


class EvaluationError(GraphQueryError):
    """Raised when an element cannot be evaluated against a view or store."""

"""Build query configuration from plain data.

Callers usually hold configuration as dicts and strings (loaded from
their own config files or request bodies); these helpers turn that into
the typed objects the library works with and reject anything unknown.

Example:
    view = view_from_dict({
        "edges": {
            "follows": {
                "properties": ["count"],
                "pre_aggregation_filter": [
                    {"selection": ["SOURCE"], "predicate": {"class": "IsIn", "values": ["a", "b"]}},
                ],
            },
        },
    })
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, TypeVar

from .elements import DirectedType
from .exceptions import ConfigurationError
from .join.match import MatchKey
from .join.methods import JoinType
from .pipeline import OnError
from .predicates import PREDICATES, ElementFilter, FilterClause, Predicate
from .view import View, ViewElementDefinition

E = TypeVar("E", bound=Enum)

_VIEW_KEYS = {"entities", "edges", "all_entities", "all_edges"}
_DEFINITION_KEYS = {
    "properties",
    "exclude_properties",
    "pre_aggregation_filter",
    "post_transform_filter",
}


def _parse_enum(enum_cls: type[E], value: Any) -> E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        for member in enum_cls:
            if text.lower() in (member.value, member.name.lower()):
                return member
    raise ConfigurationError(
        f"Unrecognised {enum_cls.__name__} {value!r}; "
        f"expected one of {[m.value for m in enum_cls]}"
    )


def parse_directed_type(value: Any) -> DirectedType:
    return _parse_enum(DirectedType, value)


def parse_match_key(value: Any) -> MatchKey:
    return _parse_enum(MatchKey, value)


def parse_join_type(value: Any) -> JoinType:
    return _parse_enum(JoinType, value)


def parse_on_error(value: Any) -> OnError:
    return _parse_enum(OnError, value)


def predicate_from_dict(config: Mapping[str, Any]) -> Predicate:
    """Build a predicate from ``{"class": name, **kwargs}``.

    ``Not`` takes a nested ``predicate``; ``And`` and ``Or`` take a list
    of nested ``predicates``; ``IsIn`` takes ``values``.
    """
    if not isinstance(config, Mapping) or "class" not in config:
        raise ConfigurationError(f"Predicate config must be a mapping with a 'class': {config!r}")
    kwargs = dict(config)
    name = kwargs.pop("class")
    cls = PREDICATES.get(name)
    if cls is None:
        raise ConfigurationError(f"Unknown predicate class {name!r}")

    try:
        if name == "Not":
            return cls(predicate_from_dict(kwargs.pop("predicate")), **kwargs)
        if name in ("And", "Or"):
            return cls(*(predicate_from_dict(p) for p in kwargs.pop("predicates")), **kwargs)
        if name == "IsIn":
            values = kwargs.pop("values")
            if isinstance(values, (str, bytes)):
                raise ConfigurationError(f"IsIn values must be a list, not {values!r}")
            return cls(*values, **kwargs)
        return cls(**kwargs)
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Invalid arguments for predicate {name!r}: {e}") from e


def filter_from_list(config: list[Mapping[str, Any]]) -> ElementFilter:
    """Build an ElementFilter from a list of ``{"selection", "predicate"}`` clauses."""
    if not isinstance(config, list):
        raise ConfigurationError("Filter config must be a list of clauses")
    clauses = []
    for clause in config:
        if not isinstance(clause, Mapping) or set(clause) != {"selection", "predicate"}:
            raise ConfigurationError(
                f"Filter clause must have exactly 'selection' and 'predicate': {clause!r}"
            )
        selection = clause["selection"]
        if isinstance(selection, str):
            selection = [selection]
        if not selection:
            raise ConfigurationError("Filter clause selection cannot be empty")
        clauses.append(FilterClause(tuple(selection), predicate_from_dict(clause["predicate"])))
    return ElementFilter(tuple(clauses))


def definition_from_dict(config: Mapping[str, Any] | None) -> ViewElementDefinition:
    if config is None:
        return ViewElementDefinition()
    unknown = set(config) - _DEFINITION_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown view definition keys: {sorted(unknown)}")

    def _filter(key: str) -> ElementFilter | None:
        value = config.get(key)
        return None if value is None else filter_from_list(value)

    return ViewElementDefinition(
        properties=config.get("properties"),
        exclude_properties=config.get("exclude_properties"),
        pre_aggregation_filter=_filter("pre_aggregation_filter"),
        post_transform_filter=_filter("post_transform_filter"),
    )


def _parse_flag(config: Mapping[str, Any], key: str) -> bool:
    value = config.get(key, False)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be true or false, got {value!r}")
    return value


def view_from_dict(config: Mapping[str, Any]) -> View:
    """Build a View from plain data. See the module docstring for the layout."""
    if not isinstance(config, Mapping):
        raise ConfigurationError("View config must be a mapping")
    unknown = set(config) - _VIEW_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown view keys: {sorted(unknown)}")

    return View(
        entities={g: definition_from_dict(d) for g, d in (config.get("entities") or {}).items()},
        edges={g: definition_from_dict(d) for g, d in (config.get("edges") or {}).items()},
        all_entities=_parse_flag(config, "all_entities"),
        all_edges=_parse_flag(config, "all_edges"),
    )


__all__ = [
    "definition_from_dict",
    "filter_from_list",
    "parse_directed_type",
    "parse_join_type",
    "parse_match_key",
    "parse_on_error",
    "predicate_from_dict",
    "view_from_dict",
]

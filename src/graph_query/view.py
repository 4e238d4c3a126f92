"""Views: declarative per-group inclusion, filtering and projection.

Public API:
    ViewElementDefinition: Rules for a single entity or edge group.
    View: Maps entity and edge groups to their definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .elements import Edge, Element, Entity
from .exceptions import ConfigurationError
from .predicates import ElementFilter


@dataclass(frozen=True)
class ViewElementDefinition:
    """Inclusion rules for one group.

    Attributes:
        properties: Allow-list of property names to keep, or None.
        exclude_properties: Deny-list of property names to drop, or None.
            Mutually exclusive with ``properties``.
        pre_aggregation_filter: Filter an element must pass to be included.
        post_transform_filter: Filter applied after property projection.
    """

    properties: frozenset[str] | None = None
    exclude_properties: frozenset[str] | None = None
    pre_aggregation_filter: ElementFilter | None = None
    post_transform_filter: ElementFilter | None = None

    def __post_init__(self) -> None:
        if self.properties is not None and self.exclude_properties is not None:
            raise ConfigurationError(
                "properties and exclude_properties cannot both be set on a view definition"
            )
        for name in ("properties", "exclude_properties"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, str):
                raise ConfigurationError(f"{name} must be a collection of names, not a string")
            object.__setattr__(self, name, frozenset(value))
        for name in ("pre_aggregation_filter", "post_transform_filter"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, ElementFilter):
                raise ConfigurationError(f"{name} must be an ElementFilter")

    @property
    def has_projection(self) -> bool:
        return self.properties is not None or self.exclude_properties is not None

    def project(self, element: Element) -> Element:
        """Apply the allow-list or deny-list, returning a copy when it changes."""
        if self.properties is not None:
            kept = {k: v for k, v in element.properties.items() if k in self.properties}
        elif self.exclude_properties is not None:
            kept = {k: v for k, v in element.properties.items() if k not in self.exclude_properties}
        else:
            return element
        return element.with_properties(kept)


_DEFAULT_DEFINITION = ViewElementDefinition()


@dataclass(frozen=True)
class View:
    """Which entity and edge groups a query returns, and how.

    A group with no definition is excluded. ``all_entities`` and
    ``all_edges`` explicitly request every group of that kind, using an
    unrestricted definition for groups not listed; an empty View
    returns nothing.

    Attributes:
        entities: Entity group name -> definition.
        edges: Edge group name -> definition.
        all_entities: Include entity groups that are not listed.
        all_edges: Include edge groups that are not listed.
    """

    entities: Mapping[str, ViewElementDefinition] = field(default_factory=dict)
    edges: Mapping[str, ViewElementDefinition] = field(default_factory=dict)
    all_entities: bool = False
    all_edges: bool = False

    def __post_init__(self) -> None:
        for name in ("entities", "edges"):
            groups = dict(getattr(self, name))
            for group, definition in groups.items():
                if not isinstance(group, str) or not group:
                    raise ConfigurationError(f"{name} group names must be non-empty strings")
                if definition is None:
                    groups[group] = _DEFAULT_DEFINITION
                elif not isinstance(definition, ViewElementDefinition):
                    raise ConfigurationError(
                        f"definition for {name} group {group!r} must be a ViewElementDefinition"
                    )
            object.__setattr__(self, name, MappingProxyType(groups))

    # ── construction helpers ──────────────────────────────────

    @classmethod
    def everything(cls) -> View:
        """A view returning every entity and edge group unmodified."""
        return cls(all_entities=True, all_edges=True)

    class Builder:
        """Fluent builder mirroring how callers compose views."""

        def __init__(self) -> None:
            self._entities: dict[str, ViewElementDefinition] = {}
            self._edges: dict[str, ViewElementDefinition] = {}
            self._all_entities = False
            self._all_edges = False

        def entity(
            self, group: str, definition: ViewElementDefinition | None = None
        ) -> View.Builder:
            self._entities[group] = definition or _DEFAULT_DEFINITION
            return self

        def entities(self, groups: Iterable[str]) -> View.Builder:
            for group in groups:
                self.entity(group)
            return self

        def edge(
            self, group: str, definition: ViewElementDefinition | None = None
        ) -> View.Builder:
            self._edges[group] = definition or _DEFAULT_DEFINITION
            return self

        def edges(self, groups: Iterable[str]) -> View.Builder:
            for group in groups:
                self.edge(group)
            return self

        def all_entities(self, value: bool = True) -> View.Builder:
            self._all_entities = value
            return self

        def all_edges(self, value: bool = True) -> View.Builder:
            self._all_edges = value
            return self

        def build(self) -> View:
            return View(
                entities=self._entities,
                edges=self._edges,
                all_entities=self._all_entities,
                all_edges=self._all_edges,
            )

    # ── lookups ───────────────────────────────────────────────

    @property
    def entity_groups(self) -> frozenset[str]:
        return frozenset(self.entities)

    @property
    def edge_groups(self) -> frozenset[str]:
        return frozenset(self.edges)

    @property
    def has_entities(self) -> bool:
        return self.all_entities or bool(self.entities)

    @property
    def has_edges(self) -> bool:
        return self.all_edges or bool(self.edges)

    @property
    def is_empty(self) -> bool:
        return not (self.has_entities or self.has_edges)

    @property
    def covers_all_groups(self) -> bool:
        return self.all_entities and self.all_edges

    def get_entity(self, group: str) -> ViewElementDefinition | None:
        definition = self.entities.get(group)
        if definition is None and self.all_entities:
            return _DEFAULT_DEFINITION
        return definition

    def get_edge(self, group: str) -> ViewElementDefinition | None:
        definition = self.edges.get(group)
        if definition is None and self.all_edges:
            return _DEFAULT_DEFINITION
        return definition

    def get_definition(self, element: Element) -> ViewElementDefinition | None:
        """Return the definition governing *element*, or None if excluded."""
        if isinstance(element, Entity):
            return self.get_entity(element.group)
        if isinstance(element, Edge):
            return self.get_edge(element.group)
        return None

    def groups(self) -> frozenset[str] | None:
        """Groups this view can return, or None when unrestricted."""
        if self.all_entities or self.all_edges:
            return None
        return self.entity_groups | self.edge_groups

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, View):
            return NotImplemented
        return (
            dict(self.entities) == dict(other.entities)
            and dict(self.edges) == dict(other.edges)
            and self.all_entities == other.all_entities
            and self.all_edges == other.all_edges
        )

    __hash__ = None  # type: ignore[assignment]


__all__ = ["View", "ViewElementDefinition"]

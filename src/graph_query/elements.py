"""Graph element data structures.

Public API:
    Element: Base class shared by entities and edges.
    Entity: Immutable single-vertex element.
    Edge: Immutable two-vertex element with a directed flag.
    IdentifierType: Names of the identifiers an element exposes.
    MatchedVertex: Which end of an edge matched a query seed.
    DirectedType: Query-time constraint on edge directionality.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IdentifierType(Enum):
    """Identifiers that can be selected from an element."""

    GROUP = "group"
    VERTEX = "vertex"
    SOURCE = "source"
    DESTINATION = "destination"
    DIRECTED = "directed"
    MATCHED_VERTEX = "matched_vertex"
    ADJACENT_MATCHED_VERTEX = "adjacent_matched_vertex"


class MatchedVertex(Enum):
    """End of an edge that matched the seed it was retrieved for."""

    SOURCE = "source"
    DESTINATION = "destination"


class DirectedType(Enum):
    """Which edges are eligible for a query."""

    DIRECTED = "directed"
    UNDIRECTED = "undirected"
    EITHER = "either"

    def accepts(self, directed: bool) -> bool:
        """Return True if an edge with the given directed flag is eligible."""
        if self is DirectedType.EITHER:
            return True
        if self is DirectedType.DIRECTED:
            return directed
        return not directed


class Element:
    """Common behaviour of entities and edges.

    Subclasses are frozen dataclasses declaring ``group`` and
    ``properties``; everything here works off those two fields plus
    ``get_identifier``.
    """

    group: str
    properties: dict[str, Any]

    def _validate(self) -> None:
        if not isinstance(self.group, str) or not self.group.strip():
            raise ValueError("group cannot be empty")
        if not isinstance(self.properties, dict):
            raise TypeError("properties must be dict")
        for key in self.properties:
            if not isinstance(key, str):
                raise TypeError("property names must be strings")
        # Never share the caller's dict.
        object.__setattr__(self, "properties", dict(self.properties))

    def get_identifier(self, identifier: IdentifierType) -> Any:
        """Return the identifier value, or None if this element has none."""
        raise NotImplementedError

    def select(self, key: IdentifierType | str) -> Any:
        """Resolve a selection key to an identifier or property value.

        Keys naming an ``IdentifierType`` (by member or by name, e.g.
        ``"VERTEX"``) select identifiers; any other string selects a
        property, returning None when the property is absent.

        Identifier names take precedence: a property literally named
        ``"VERTEX"``, ``"SOURCE"`` or any other ``IdentifierType`` name
        cannot be selected through this method.  Read such properties
        from ``properties`` directly.
        """
        if isinstance(key, IdentifierType):
            return self.get_identifier(key)
        if key in IdentifierType.__members__:
            return self.get_identifier(IdentifierType[key])
        return self.properties.get(key)

    def with_properties(self, properties: dict[str, Any]) -> Element:
        """Return a copy of this element carrying *properties*."""
        return dataclasses.replace(self, properties=dict(properties))

    def identifiers(self) -> tuple:
        raise NotImplementedError

    def __hash__(self) -> int:
        # Property values need not be hashable; identifiers must be.
        return hash((type(self).__name__, self.group, self.identifiers()))


@dataclass(frozen=True)
class Entity(Element):
    """An immutable element attached to a single vertex.

    Attributes:
        group: Group name, selects the view definition that applies.
        vertex: The vertex identifier.
        properties: Property bag, copied on construction.
    """

    group: str
    vertex: Any
    properties: dict[str, Any] = field(default_factory=dict)

    __hash__ = Element.__hash__

    def __post_init__(self) -> None:
        self._validate()

    def identifiers(self) -> tuple:
        return (self.vertex,)

    def get_identifier(self, identifier: IdentifierType) -> Any:
        if identifier is IdentifierType.GROUP:
            return self.group
        if identifier is IdentifierType.VERTEX:
            return self.vertex
        return None


@dataclass(frozen=True)
class Edge(Element):
    """An immutable element connecting two vertices.

    Attributes:
        group: Group name, selects the view definition that applies.
        source: Source vertex.
        destination: Destination vertex.
        directed: Whether the edge is directed. Fixed at construction.
        matched_vertex: End of the edge that matched a query seed, if
            the edge was retrieved for a seed. Not part of equality.
        properties: Property bag, copied on construction.
    """

    group: str
    source: Any
    destination: Any
    directed: bool = True
    matched_vertex: MatchedVertex | None = field(default=None, compare=False)
    properties: dict[str, Any] = field(default_factory=dict)

    __hash__ = Element.__hash__

    def __post_init__(self) -> None:
        self._validate()
        if not isinstance(self.directed, bool):
            raise TypeError("directed must be bool")
        if self.matched_vertex is not None and not isinstance(self.matched_vertex, MatchedVertex):
            raise TypeError("matched_vertex must be MatchedVertex enum")

    def identifiers(self) -> tuple:
        return (self.source, self.destination, self.directed)

    @property
    def matched_vertex_value(self) -> Any:
        """The matched end; the source when no match is recorded."""
        if self.matched_vertex is MatchedVertex.DESTINATION:
            return self.destination
        return self.source

    @property
    def adjacent_matched_vertex_value(self) -> Any:
        """The end opposite the matched one."""
        if self.matched_vertex is MatchedVertex.DESTINATION:
            return self.source
        return self.destination

    def with_matched_vertex(self, matched_vertex: MatchedVertex | None) -> Edge:
        """Return a copy of this edge tagged with *matched_vertex*."""
        return dataclasses.replace(self, matched_vertex=matched_vertex)

    def get_identifier(self, identifier: IdentifierType) -> Any:
        if identifier is IdentifierType.GROUP:
            return self.group
        if identifier is IdentifierType.SOURCE:
            return self.source
        if identifier is IdentifierType.DESTINATION:
            return self.destination
        if identifier is IdentifierType.DIRECTED:
            return self.directed
        if identifier is IdentifierType.MATCHED_VERTEX:
            return self.matched_vertex_value
        if identifier is IdentifierType.ADJACENT_MATCHED_VERTEX:
            return self.adjacent_matched_vertex_value
        return None


__all__ = [
    "DirectedType",
    "Edge",
    "Element",
    "Entity",
    "IdentifierType",
    "MatchedVertex",
]

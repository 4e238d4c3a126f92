"""Extract vertices from a stream of elements.

Public API:
    EdgeVertices: Which ends of an edge to emit.
    UseMatchedVertex: Whether to emit edge ends relative to the matched vertex.
    to_vertices: Lazily convert elements to vertices.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator

from .elements import Edge, Element, Entity
from .exceptions import ConfigurationError


class EdgeVertices(Enum):
    NONE = "none"
    SOURCE = "source"
    DESTINATION = "destination"
    BOTH = "both"


class UseMatchedVertex(Enum):
    IGNORE = "ignore"  # Use EdgeVertices
    EQUAL = "equal"  # The matched vertex
    OPPOSITE = "opposite"  # The vertex adjacent to the matched one


def _edge_vertices(edge: Edge, edge_vertices: EdgeVertices, use_matched: UseMatchedVertex) -> Iterator[Any]:
    if use_matched is UseMatchedVertex.EQUAL:
        yield edge.matched_vertex_value
    elif use_matched is UseMatchedVertex.OPPOSITE:
        yield edge.adjacent_matched_vertex_value
    else:
        if edge_vertices in (EdgeVertices.SOURCE, EdgeVertices.BOTH):
            yield edge.source
        if edge_vertices in (EdgeVertices.DESTINATION, EdgeVertices.BOTH):
            yield edge.destination


def to_vertices(
    elements: Iterable[Element],
    edge_vertices: EdgeVertices = EdgeVertices.NONE,
    use_matched_vertex: UseMatchedVertex = UseMatchedVertex.IGNORE,
) -> Iterator[Any]:
    """Yield the vertices of *elements* in order, without deduplication.

    Entities yield their vertex.  Edges yield the matched or adjacent
    vertex when *use_matched_vertex* is EQUAL or OPPOSITE, otherwise
    the ends chosen by *edge_vertices*.

    Raises:
        ConfigurationError: If an option is not a recognised enum value.
    """
    if not isinstance(edge_vertices, EdgeVertices):
        raise ConfigurationError(f"Unrecognised edge vertices option: {edge_vertices!r}")
    if not isinstance(use_matched_vertex, UseMatchedVertex):
        raise ConfigurationError(f"Unrecognised matched vertex option: {use_matched_vertex!r}")
    return _iter_vertices(elements, edge_vertices, use_matched_vertex)


def _iter_vertices(
    elements: Iterable[Element],
    edge_vertices: EdgeVertices,
    use_matched_vertex: UseMatchedVertex,
) -> Iterator[Any]:
    for element in elements:
        if isinstance(element, Entity):
            yield element.vertex
        elif isinstance(element, Edge):
            yield from _edge_vertices(element, edge_vertices, use_matched_vertex)


__all__ = ["EdgeVertices", "UseMatchedVertex", "to_vertices"]

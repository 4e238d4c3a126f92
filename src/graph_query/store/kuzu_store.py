"""KuzuElementStore -- Kuzu-backed implementation of the ElementStore protocol.

Entities and edges live in a single node table.  Vertices and property
bags are stored as JSON text, with tuples tagged so they come back
as tuples; group and directed-type hints are pushed down into the
Cypher query and rows are streamed lazily in insertion order.

Public API:
    KuzuElementStore: Concrete ElementStore implementation backed by Kuzu.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Iterable, Iterator

import kuzu

from ..elements import DirectedType, Edge, Element, Entity, MatchedVertex
from ..iterables import CloseableIterable

logger = logging.getLogger(__name__)

TABLE_NAME = "GraphElement"
ENTITY_KIND = "entity"
EDGE_KIND = "edge"

_COLUMNS = "e.kind, e.grp, e.vertex, e.source, e.destination, e.directed, e.matched, e.properties"
_TUPLE_TAG = "__tuple__"


def _encode(value: Any) -> Any:
    """Convert *value* to plain JSON data, tagging tuples so they survive."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, tuple):
        return {_TUPLE_TAG: [_encode(v) for v in value]}
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        if any(not isinstance(k, str) for k in value):
            raise TypeError("Only string keys can be stored in nested mappings")
        if _TUPLE_TAG in value:
            raise TypeError(f"{_TUPLE_TAG!r} is a reserved key")
        return {k: _encode(v) for k, v in value.items()}
    raise TypeError(f"Cannot store value of type {type(value).__name__}")


def _decode(obj: dict[str, Any]) -> Any:
    if len(obj) == 1 and _TUPLE_TAG in obj:
        return tuple(obj[_TUPLE_TAG])
    return obj


def _dumps(value: Any) -> str:
    return json.dumps(_encode(value))


def _loads(text: str) -> Any:
    return json.loads(text, object_hook=_decode)


class KuzuElementStore:
    """Kuzu graph database implementation of the ElementStore protocol.

    All Cypher queries use parameterised bindings.

    Args:
        db_path: Filesystem path for the Kuzu database.
        store_id: Optional human-readable identifier; auto-generated if None.
    """

    # ── construction / lifecycle ──────────────────────────────

    def __init__(self, db_path: Path | str, store_id: str | None = None) -> None:
        self._db_path = Path(db_path)
        self._store_id = store_id or f"kuzu-{uuid.uuid4().hex[:8]}"
        self._db = kuzu.Database(str(self._db_path))
        self._conn = kuzu.Connection(self._db)
        self._ensure_table()

    @property
    def store_id(self) -> str:
        return self._store_id

    def close(self) -> None:
        """Release Kuzu resources."""
        self._conn = None  # type: ignore[assignment]
        self._db = None  # type: ignore[assignment]

    def _ensure_table(self) -> None:
        """Create the element table if it does not exist. Idempotent."""
        ddl = (
            f"CREATE NODE TABLE IF NOT EXISTS {TABLE_NAME}("
            "seq SERIAL, kind STRING, grp STRING, vertex STRING, "
            "source STRING, destination STRING, directed BOOLEAN, "
            "matched STRING, properties STRING, PRIMARY KEY(seq))"
        )
        self._connection().execute(ddl)

    def _connection(self) -> kuzu.Connection:
        if self._conn is None:
            raise RuntimeError(f"Store {self._store_id} is closed")
        return self._conn

    # ── writes ────────────────────────────────────────────────

    def add_elements(self, elements: Iterable[Element]) -> int:
        """Append elements to the table in order.

        Raises:
            TypeError: If any element holds a value that would not come
                back unchanged (anything other than None, str, bool, int,
                float, and lists, tuples and str-keyed dicts of those).
                Nothing is written in that case.
        """
        conn = self._connection()
        cypher = (
            f"CREATE (:{TABLE_NAME} {{kind: $kind, grp: $grp, vertex: $vertex, "
            "source: $source, destination: $destination, directed: $directed, "
            "matched: $matched, properties: $properties})"
        )
        # Encode everything first so an unstorable element writes nothing.
        rows = [self._element_to_params(element) for element in elements]
        for params in rows:
            conn.execute(cypher, params)
        added = len(rows)
        logger.debug("Stored %d elements in %s", added, self._store_id)
        return added

    # ── reads ─────────────────────────────────────────────────

    def get_all_elements(
        self,
        groups: Iterable[str] | None = None,
        directed_type: DirectedType = DirectedType.EITHER,
    ) -> CloseableIterable[Element]:
        """Stream stored elements, pushing group and directed filters into Cypher."""
        where_parts: list[str] = []
        params: dict[str, Any] = {}

        if groups is not None:
            wanted = sorted(set(groups))
            if not wanted:
                return CloseableIterable.empty()
            where_parts.append("list_contains($groups, e.grp)")
            params["groups"] = wanted

        if directed_type is DirectedType.DIRECTED:
            where_parts.append(f"(e.kind = '{ENTITY_KIND}' OR e.directed = true)")
        elif directed_type is DirectedType.UNDIRECTED:
            where_parts.append(f"(e.kind = '{ENTITY_KIND}' OR e.directed = false)")

        where_clause = f" WHERE {' AND '.join(where_parts)}" if where_parts else ""
        cypher = f"MATCH (e:{TABLE_NAME}){where_clause} RETURN {_COLUMNS} ORDER BY e.seq"
        return CloseableIterable(self._stream(self._connection(), cypher, params))

    def _stream(self, conn: kuzu.Connection, cypher: str, params: dict[str, Any]) -> Iterator[Element]:
        result = conn.execute(cypher, params)
        try:
            while result.has_next():
                yield self._row_to_element(result.get_next())
        finally:
            result.close()

    # ── private helpers ───────────────────────────────────────

    @staticmethod
    def _element_to_params(element: Element) -> dict[str, Any]:
        """Convert an element to query parameters."""
        params: dict[str, Any] = {
            "grp": element.group,
            "vertex": "",
            "source": "",
            "destination": "",
            "directed": False,
            "matched": "",
            "properties": _dumps(element.properties),
        }
        if isinstance(element, Entity):
            params["kind"] = ENTITY_KIND
            params["vertex"] = _dumps(element.vertex)
        elif isinstance(element, Edge):
            params["kind"] = EDGE_KIND
            params["source"] = _dumps(element.source)
            params["destination"] = _dumps(element.destination)
            params["directed"] = element.directed
            if element.matched_vertex is not None:
                params["matched"] = element.matched_vertex.value
        else:
            raise TypeError(f"Cannot store {type(element).__name__}; expected Entity or Edge")
        return params

    @staticmethod
    def _row_to_element(row: list[Any]) -> Element:
        """Convert a result row to an Entity or Edge."""
        kind, group, vertex, source, destination, directed, matched, properties = row
        props = _loads(properties) if properties else {}
        if kind == ENTITY_KIND:
            return Entity(group=group, vertex=_loads(vertex), properties=props)
        return Edge(
            group=group,
            source=_loads(source),
            destination=_loads(destination),
            directed=bool(directed),
            matched_vertex=MatchedVertex(matched) if matched else None,
            properties=props,
        )


__all__ = ["KuzuElementStore"]

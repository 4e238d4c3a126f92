"""Tests for the element stores (InMemoryElementStore, KuzuElementStore).

Test categories:
- TestInMemoryStore: ordering, push-down, snapshots, lifecycle
- TestKuzuStore: round trip, ordering, push-down, lazy streaming
- TestProtocolCompliance: isinstance checks
"""

from __future__ import annotations

import pytest

from graph_query import (
    DirectedType,
    Edge,
    ElementStore,
    Entity,
    InMemoryElementStore,
    MatchedVertex,
)

from conftest import EDGE, EDGE_2, ENTITY, ENTITY_2


class TestInMemoryStore:
    def test_returns_elements_in_insertion_order(self, memory_store, elements):
        with memory_store.get_all_elements() as results:
            assert list(results) == elements

    def test_group_push_down(self, memory_store):
        results = list(memory_store.get_all_elements(groups={ENTITY_2, EDGE_2}))
        assert [e.group for e in results] == [EDGE_2, ENTITY_2]

    def test_directed_push_down(self, memory_store, entities):
        results = list(memory_store.get_all_elements(directed_type=DirectedType.UNDIRECTED))
        edges = [e for e in results if isinstance(e, Edge)]
        assert len(edges) == 1
        assert edges[0].directed is False
        assert len(results) == 1 + len(entities)

    def test_empty_groups_returns_nothing(self, memory_store):
        assert list(memory_store.get_all_elements(groups=set())) == []

    def test_reads_use_snapshot(self, memory_store, elements):
        results = memory_store.get_all_elements()
        memory_store.add_elements([Entity(ENTITY, "late")])
        assert Entity(ENTITY, "late") not in list(results)
        assert len(memory_store) == len(elements) + 1

    def test_rejects_non_elements(self):
        store = InMemoryElementStore()
        with pytest.raises(TypeError):
            store.add_elements([{"group": "x"}])

    def test_closed_store_rejects_reads(self):
        store = InMemoryElementStore()
        store.close()
        with pytest.raises(RuntimeError):
            store.get_all_elements()


class TestKuzuStore:
    def test_round_trip(self, kuzu_store, elements):
        assert kuzu_store.add_elements(elements) == len(elements)
        with kuzu_store.get_all_elements() as results:
            assert list(results) == elements

    def test_values_keep_json_types(self, kuzu_store):
        entity = Entity(ENTITY, 1, {"count": 1, "weight": 2.5, "tags": ["a"], "ok": True})
        edge = Edge(EDGE, 1, 2, False, properties={})
        kuzu_store.add_elements([entity, edge])
        results = list(kuzu_store.get_all_elements())
        assert results == [entity, edge]
        assert results[0].vertex == 1

    def test_matched_vertex_round_trip(self, kuzu_store):
        edge = Edge(EDGE, "a", "b", matched_vertex=MatchedVertex.DESTINATION)
        kuzu_store.add_elements([edge])
        (result,) = list(kuzu_store.get_all_elements())
        assert result.matched_vertex is MatchedVertex.DESTINATION

    def test_group_push_down(self, kuzu_store, elements):
        kuzu_store.add_elements(elements)
        results = list(kuzu_store.get_all_elements(groups=[ENTITY_2, EDGE_2]))
        assert [e.group for e in results] == [EDGE_2, ENTITY_2]

    def test_empty_groups_returns_nothing(self, kuzu_store, elements):
        kuzu_store.add_elements(elements)
        assert list(kuzu_store.get_all_elements(groups=[])) == []

    @pytest.mark.parametrize(
        "directed_type, edge_count",
        [(DirectedType.DIRECTED, 3), (DirectedType.UNDIRECTED, 1), (DirectedType.EITHER, 4)],
    )
    def test_directed_push_down(self, kuzu_store, elements, entities, directed_type, edge_count):
        kuzu_store.add_elements(elements)
        results = list(kuzu_store.get_all_elements(directed_type=directed_type))
        edges = [e for e in results if isinstance(e, Edge)]
        found_entities = [e for e in results if isinstance(e, Entity)]
        assert len(edges) == edge_count
        assert all(directed_type.accepts(e.directed) for e in edges)
        assert len(found_entities) == len(entities)

    def test_stream_can_be_closed_early(self, kuzu_store, elements):
        kuzu_store.add_elements(elements)
        results = kuzu_store.get_all_elements()
        iterator = iter(results)
        assert next(iterator) == elements[0]
        results.close()
        assert results.closed
        # The store stays usable after an abandoned read.
        assert len(list(kuzu_store.get_all_elements())) == len(elements)

    def test_rejects_non_json_values(self, kuzu_store):
        with pytest.raises(TypeError):
            kuzu_store.add_elements([Entity(ENTITY, object())])

    def test_tuple_values_round_trip(self, kuzu_store):
        entity = Entity(ENTITY, ("a", 1), {"pair": (1, 2), "nested": [{"point": (0.5, None)}]})
        edge = Edge(EDGE, ("a", 1), ("b", (2, 3)))
        kuzu_store.add_elements([entity, edge])
        results = list(kuzu_store.get_all_elements())
        assert results == [entity, edge]
        assert results[0].vertex == ("a", 1)
        assert isinstance(results[0].properties["pair"], tuple)
        assert isinstance(results[0].properties["nested"], list)
        assert hash(results[0]) == hash(entity)
        assert results[1].destination == ("b", (2, 3))

    @pytest.mark.parametrize(
        "value",
        [{1, 2}, {1: "int key"}, {"__tuple__": [1]}, b"bytes"],
    )
    def test_rejects_values_that_would_change(self, kuzu_store, value):
        with pytest.raises(TypeError):
            kuzu_store.add_elements([Entity(ENTITY, "ok"), Entity(ENTITY, "v", {"p": value})])
        # Validation happens before any row is written.
        assert list(kuzu_store.get_all_elements()) == []

    def test_closed_store_rejects_reads(self, kuzu_store):
        kuzu_store.close()
        with pytest.raises(RuntimeError):
            kuzu_store.get_all_elements()


class TestProtocolCompliance:
    def test_isinstance(self, memory_store, kuzu_store):
        assert isinstance(memory_store, ElementStore)
        assert isinstance(kuzu_store, ElementStore)

    def test_store_ids(self, memory_store, kuzu_store):
        assert memory_store.store_id == "test-memory"
        assert kuzu_store.store_id == "test-kuzu"

"""Pytest configuration and fixtures for graph-query-lib tests."""

import pytest

from graph_query import Edge, Entity, InMemoryElementStore, KuzuElementStore

ENTITY = "BasicEntity"
ENTITY_2 = "BasicEntity2"
EDGE = "BasicEdge"
EDGE_2 = "BasicEdge2"


def make_entities():
    """Entities used across query tests; A3 is private, A1 basic."""
    return [
        Entity(ENTITY, "A1", {"count": 1, "visibility": "basic"}),
        Entity(ENTITY, "A2", {"count": 2}),
        Entity(ENTITY, "A3", {"count": 3, "visibility": "private"}),
        Entity(ENTITY_2, "B1", {"count": 4}),
    ]


def make_edges():
    """Edges used across query tests; one undirected, one basic."""
    return [
        Edge(EDGE, "SRC1", "DST1", True, properties={"count": 1, "weight": 2}),
        Edge(EDGE, "SRC2", "DST2", False, properties={"count": 1, "weight": 3, "visibility": "basic"}),
        Edge(EDGE, "SRC3", "DST3", True, properties={"count": 1, "weight": 4}),
        Edge(EDGE_2, "SRC1", "A1", True, properties={"count": 5}),
    ]


@pytest.fixture
def entities():
    return make_entities()


@pytest.fixture
def edges():
    return make_edges()


@pytest.fixture
def elements():
    """Edges followed by entities, in store insertion order."""
    return make_edges() + make_entities()


@pytest.fixture
def memory_store(elements):
    """In-memory store pre-populated with every test element."""
    s = InMemoryElementStore(store_id="test-memory", elements=elements)
    yield s
    s.close()


@pytest.fixture
def kuzu_store(tmp_path):
    """Create a fresh, empty KuzuElementStore for each test."""
    db_path = tmp_path / "test_element_db"
    s = KuzuElementStore(db_path=db_path, store_id="test-kuzu")
    yield s
    s.close()

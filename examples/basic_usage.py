"""Basic usage example for graph-query-lib."""

import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


from graph_query import (
    DirectedType,
    Edge,
    ElementFilter,
    ElementMatch,
    Entity,
    GetAllElements,
    GetElements,
    IdentifierType,
    IsMoreThan,
    JoinType,
    KuzuElementStore,
    MatchKey,
    QueryExecutor,
    User,
    View,
    ViewElementDefinition,
    join,
)


def main():
    print("=" * 60)
    print("graph-query-lib - Basic Usage Example")
    print("=" * 60)

    # 1. Join two element lists on their vertex
    print("\n1. Full join keyed on the left...")
    left = [Entity("A", 1), Entity("A", 2)]
    right = [Entity("B", 2), Entity("B", 3)]
    for pair in join(left, right, ElementMatch(IdentifierType.VERTEX), MatchKey.LEFT, JoinType.FULL):
        print(f"   {pair.left} <-> {pair.right}")

    # 2. Store elements in Kuzu
    print("\n2. Storing elements...")
    db_path = Path(tempfile.mkdtemp()) / "demo_graph"
    store = KuzuElementStore(db_path=db_path, store_id="demo")
    stored = store.add_elements([
        Entity("person", "alice", {"age": 34}),
        Entity("person", "bob", {"age": 27}),
        Edge("knows", "alice", "bob", True, properties={"since": 2015, "weight": 0.8}),
        Edge("knows", "bob", "carol", False, properties={"since": 2020, "weight": 0.3}),
    ])
    print(f"   Stored {stored} elements in {db_path}")

    executor = QueryExecutor(store)
    user = User("demo-user")

    # 3. Everything
    print("\n3. All elements...")
    with executor.execute(GetAllElements(), user) as results:
        for element in results:
            print(f"   {element}")

    # 4. Filter and project
    print("\n4. People over 30, directed edges with weight only...")
    view = (
        View.Builder()
        .entity(
            "person",
            ViewElementDefinition(
                pre_aggregation_filter=ElementFilter.Builder()
                .select("age")
                .execute(IsMoreThan(30))
                .build()
            ),
        )
        .edge("knows", ViewElementDefinition(properties={"weight"}))
        .build()
    )
    with executor.execute(GetAllElements(view, DirectedType.DIRECTED), user) as results:
        for element in results:
            print(f"   {element}")

    # 5. Seeded query
    print("\n5. Elements related to bob...")
    with executor.execute(GetElements(["bob"]), user) as results:
        for element in results:
            matched = getattr(element, "matched_vertex", None)
            suffix = f" (matched {matched.value})" if matched else ""
            print(f"   {element}{suffix}")

    store.close()

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()

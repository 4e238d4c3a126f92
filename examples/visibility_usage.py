#!/usr/bin/env python3
"""Example demonstrating visibility labels and error policies.

This example shows:
1. Labelling elements with visibility tokens
2. Querying as users holding different authorisations
3. Skipping elements whose labels cannot be evaluated
"""

from graph_query import (
    EvaluationError,
    Entity,
    GetAllElements,
    InMemoryElementStore,
    OnError,
    QueryExecutor,
    User,
)


def example_user_authorisations():
    """Example 1: The same store seen by three users."""
    print("=" * 60)
    print("Example 1: User Authorisations")
    print("=" * 60)

    store = InMemoryElementStore(elements=[
        Entity("document", "public-notes", {"pages": 3}),
        Entity("document", "team-plan", {"pages": 8, "visibility": "basic"}),
        Entity("document", "salaries", {"pages": 2, "visibility": "basic&private"}),
    ])
    executor = QueryExecutor(store)

    for user in (
        User("guest"),
        User("member", {"basic"}),
        User("manager", {"basic", "private"}),
    ):
        with executor.execute(GetAllElements(), user) as results:
            vertices = [element.vertex for element in results]
        print(f"{user.user_id:>8}: {vertices}")


def example_error_policies():
    """Example 2: A malformed label halts or is skipped."""
    print("\n" + "=" * 60)
    print("Example 2: Error Policies")
    print("=" * 60)

    elements = [
        Entity("document", "ok"),
        Entity("document", "broken", {"visibility": 42}),
        Entity("document", "also-ok"),
    ]

    try:
        list(QueryExecutor(InMemoryElementStore(elements=elements)).execute(GetAllElements()))
    except EvaluationError as e:
        print(f"✗ HALT: {e}")

    skipping = QueryExecutor(InMemoryElementStore(elements=elements), on_error=OnError.SKIP)
    with skipping.execute(GetAllElements()) as results:
        print(f"✓ SKIP: {[element.vertex for element in results]}")


def main():
    example_user_authorisations()
    example_error_policies()


if __name__ == "__main__":
    main()

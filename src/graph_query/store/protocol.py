"""ElementStore protocol -- the interface the query executor reads from.

Public API:
    ElementStore: Runtime-checkable protocol defining the store contract.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..elements import DirectedType, Element
from ..iterables import CloseableIterable


@runtime_checkable
class ElementStore(Protocol):
    """Common interface for element storage backends.

    Group and directed-type arguments are push-down hints: a store may
    return more than was asked for, because the query pipeline applies
    every constraint again.
    """

    # ── identity ──────────────────────────────────────────────

    @property
    def store_id(self) -> str:
        """Unique identifier for this store instance."""
        ...

    # ── writes ────────────────────────────────────────────────

    def add_elements(self, elements: Iterable[Element]) -> int:
        """Store *elements* in order. Returns the number stored."""
        ...

    # ── reads ─────────────────────────────────────────────────

    def get_all_elements(
        self,
        groups: Iterable[str] | None = None,
        directed_type: DirectedType = DirectedType.EITHER,
    ) -> CloseableIterable[Element]:
        """Return a lazy, closable sequence of stored elements.

        Args:
            groups: Groups to return, or None for every group.
            directed_type: Which edges to return.
        """
        ...

    # ── lifecycle ─────────────────────────────────────────────

    def close(self) -> None:
        """Release resources held by the store."""
        ...


__all__ = ["ElementStore"]

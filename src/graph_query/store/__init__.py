"""Element stores the query executor reads from.

Public API:
    ElementStore: Protocol all backends implement.
    InMemoryElementStore: List-backed store for tests and small graphs.
    KuzuElementStore: Kuzu-backed store.
"""

from __future__ import annotations

from .kuzu_store import KuzuElementStore
from .memory_store import InMemoryElementStore
from .protocol import ElementStore

__all__ = ["ElementStore", "InMemoryElementStore", "KuzuElementStore"]

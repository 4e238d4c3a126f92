"""InMemoryElementStore -- list-backed ElementStore for tests and small graphs.

Public API:
    InMemoryElementStore: Dict/list based implementation of ElementStore.
"""

from __future__ import annotations

import threading
from typing import Iterable, Iterator

from ..elements import DirectedType, Edge, Element
from ..iterables import CloseableIterable


class InMemoryElementStore:
    """Insertion-ordered element store held in memory.

    Reads iterate over a snapshot taken when ``get_all_elements`` is
    called, so writes during iteration are not observed.  Thread-safe
    via a reentrant lock.

    Args:
        store_id: Human-readable identifier for this store instance.
        elements: Optional initial elements.
    """

    def __init__(self, store_id: str = "in_memory", elements: Iterable[Element] = ()) -> None:
        self._store_id = store_id
        self._elements: list[Element] = []
        self._lock = threading.RLock()
        self._closed = False
        self.add_elements(elements)

    @property
    def store_id(self) -> str:
        return self._store_id

    # ── writes ───────────────────────────────────────────────

    def add_elements(self, elements: Iterable[Element]) -> int:
        added = 0
        with self._lock:
            self._check_open()
            for element in elements:
                if not isinstance(element, Element):
                    raise TypeError(f"Cannot store {type(element).__name__}; expected Element")
                self._elements.append(element)
                added += 1
        return added

    # ── reads ────────────────────────────────────────────────

    def get_all_elements(
        self,
        groups: Iterable[str] | None = None,
        directed_type: DirectedType = DirectedType.EITHER,
    ) -> CloseableIterable[Element]:
        with self._lock:
            self._check_open()
            snapshot = list(self._elements)
        wanted = None if groups is None else frozenset(groups)
        return CloseableIterable(self._scan(snapshot, wanted, directed_type))

    @staticmethod
    def _scan(
        snapshot: list[Element],
        groups: frozenset[str] | None,
        directed_type: DirectedType,
    ) -> Iterator[Element]:
        for element in snapshot:
            if groups is not None and element.group not in groups:
                continue
            if isinstance(element, Edge) and not directed_type.accepts(element.directed):
                continue
            yield element

    def __len__(self) -> int:
        with self._lock:
            return len(self._elements)

    # ── lifecycle ────────────────────────────────────────────

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Store {self._store_id} is closed")

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._elements = []


__all__ = ["InMemoryElementStore"]

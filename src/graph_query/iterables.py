"""Lazy result sequences that release upstream resources when closed.

Public API:
    CloseableIterable: Single-pass iterable with an explicit close hook.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CloseableIterable(Generic[T]):
    """A single-pass, lazily evaluated sequence with a release hook.

    Closing stops the wrapped iterator (generators receive
    ``GeneratorExit`` so their ``finally`` blocks run) and then calls
    *on_close*.  ``close`` is idempotent and is called automatically
    when iteration is exhausted or when used as a context manager.

    Args:
        iterable: Source of items.
        on_close: Optional callable releasing resources held for the source.
    """

    def __init__(self, iterable: Iterable[T], on_close: Callable[[], Any] | None = None) -> None:
        self._iterable = iterable
        self._iterator: Iterator[T] | None = None
        self._on_close = on_close
        self._closed = False

    @classmethod
    def empty(cls) -> CloseableIterable[T]:
        return cls(())

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[T]:
        if self._closed:
            raise ValueError("I/O operation on closed CloseableIterable")
        if self._iterator is not None:
            raise ValueError("CloseableIterable can only be iterated once")
        self._iterator = iter(self._iterable)
        return self._drain()

    def _drain(self) -> Iterator[T]:
        try:
            yield from self._iterator
        finally:
            self.close()

    def close(self) -> None:
        """Release the source. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            for source in (self._iterator, self._iterable):
                close = getattr(source, "close", None)
                if callable(close):
                    close()
        finally:
            if self._on_close is not None:
                logger.debug("Releasing resources for %s", type(self._iterable).__name__)
                self._on_close()

    def __enter__(self) -> CloseableIterable[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["CloseableIterable"]

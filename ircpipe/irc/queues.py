"""Closable FIFO queue shared by the outbound pump and channel consumers."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from ..errors import QueueClosed

T = TypeVar("T")

_CLOSED = object()


class ClosableQueue(Generic[T]):
    """Unbounded asyncio FIFO that can be closed from the owning side.

    After ``close()`` every blocked and future ``get()`` raises ``QueueClosed``
    once the already-queued items are drained, and ``put_nowait()`` raises
    immediately. Supports ``async for`` until closed.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        size = self._queue.qsize()
        return size - 1 if self._closed and size else size

    def empty(self) -> bool:
        return self.qsize() == 0

    def put_nowait(self, item: T) -> None:
        if self._closed:
            raise QueueClosed()
        self._queue.put_nowait(item)

    async def get(self) -> T:
        item = await self._queue.get()
        if item is _CLOSED:
            # Leave the marker in place for any other waiting consumer.
            self._queue.put_nowait(_CLOSED)
            raise QueueClosed()
        return item  # type: ignore[return-value]

    def get_nowait(self) -> T:
        """Return the next item without waiting.

        Raises:
            asyncio.QueueEmpty: Nothing is queued and the queue is open.
            QueueClosed: The queue is closed and drained.
        """
        item = self._queue.get_nowait()
        if item is _CLOSED:
            self._queue.put_nowait(_CLOSED)
            raise QueueClosed()
        return item  # type: ignore[return-value]

    def drain_nowait(self) -> list[T]:
        """Remove and return every queued item without waiting.

        The close marker, if present, stays queued.
        """
        items: list[T] = []
        while True:
            try:
                items.append(self.get_nowait())
            except (asyncio.QueueEmpty, QueueClosed):
                return items

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> ClosableQueue[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except QueueClosed:
            raise StopAsyncIteration from None

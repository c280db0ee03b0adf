"""Per-channel delivery endpoint: a watchable topic slot and a text queue."""

from __future__ import annotations

import asyncio

from ..errors import QueueClosed
from .queues import ClosableQueue


def normalize_channel_name(name: str) -> str:
    """Channel names compare case-insensitively; the canonical form is upper-case."""
    return name.strip().upper()


class TopicSlot:
    """Latest known topic of a channel plus a way to wait for the next one."""

    def __init__(self) -> None:
        self._value: str | None = None
        self._version = 0
        self._changed = asyncio.Event()
        self._closed = False

    @property
    def value(self) -> str | None:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def set(self, topic: str) -> None:
        if self._closed:
            raise QueueClosed("Topic slot is closed")
        self._value = topic
        self._version += 1
        self._wake()

    async def wait_for_update(self) -> str:
        """Block until the topic is set again and return the new value.

        Raises:
            QueueClosed: The slot was closed before an update arrived.
        """
        if self._closed:
            raise QueueClosed("Topic slot is closed")
        seen = self._version
        changed = self._changed
        await changed.wait()
        if self._version == seen:
            raise QueueClosed("Topic slot is closed")
        return self._value  # type: ignore[return-value]

    async def get(self) -> str:
        """Return the current topic, waiting for the first report if none yet."""
        if self._value is not None:
            return self._value
        return await self.wait_for_update()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._wake()

    def _wake(self) -> None:
        # Swap before setting so waiters registered later block on a fresh event.
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()


class Channel:
    """One joined conversation.

    The client's registry owns the instance; consumers read ``topic`` and
    ``text`` (or iterate the channel) and may post with ``say``.
    """

    def __init__(self, name: str, outbound: ClosableQueue[str] | None = None) -> None:
        self.name = normalize_channel_name(name)
        self.topic = TopicSlot()
        self.text: ClosableQueue[str] = ClosableQueue()
        self._outbound = outbound

    def __repr__(self) -> str:
        return f"Channel({self.name!r}, topic={self.topic.value!r}, pending={self.text.qsize()})"

    @property
    def closed(self) -> bool:
        return self.text.closed

    def deliver_text(self, text: str) -> None:
        self.text.put_nowait(text)

    def update_topic(self, topic: str) -> None:
        self.topic.set(topic)

    def say(self, text: str) -> None:
        """Queue a PRIVMSG to this channel on the client's outbound queue."""
        if self._outbound is None:
            raise QueueClosed(f"Channel {self.name} has no outbound queue")
        for line in text.splitlines() or [""]:
            self._outbound.put_nowait(f"PRIVMSG {self.name} :{line}")

    def close(self) -> None:
        self.topic.close()
        self.text.close()

    def __aiter__(self) -> ClosableQueue[str]:
        return self.text.__aiter__()

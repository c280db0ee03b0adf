"""Channel registry keyed by normalized channel name."""

from __future__ import annotations

from collections.abc import Iterator

from .channel import Channel, normalize_channel_name
from .queues import ClosableQueue


class ChannelRegistry:
    """Owned table of joined channels.

    Only the client's ``join`` adds entries; dispatch units only read. All of
    it runs on one event loop, so a plain dict is enough.
    """

    def __init__(self, outbound: ClosableQueue[str] | None = None) -> None:
        self._channels: dict[str, Channel] = {}
        self._outbound = outbound

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_channel_name(name) in self._channels

    def __iter__(self) -> Iterator[Channel]:
        return iter(list(self._channels.values()))

    def names(self) -> list[str]:
        return list(self._channels)

    def add(self, name: str) -> tuple[Channel, bool]:
        """Return the channel for ``name``, creating it if needed.

        The flag is True when a new entry was created.
        """
        key = normalize_channel_name(name)
        channel = self._channels.get(key)
        if channel is not None:
            return channel, False
        channel = Channel(key, self._outbound)
        self._channels[key] = channel
        return channel, True

    def lookup(self, name: str) -> Channel | None:
        return self._channels.get(normalize_channel_name(name))

    def close_all(self) -> None:
        for channel in self._channels.values():
            channel.close()

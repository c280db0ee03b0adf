"""Message classification and routing."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import ParseError, QueueClosed, RoutingMiss
from .diagnostics import Diagnostics
from .models import IRCMessage
from .parser import (
    parse_irc_message,
    split_first_token,
    strip_trailing_marker,
    trailing_text,
)
from .queues import ClosableQueue
from .registry import ChannelRegistry

RPL_TOPIC = "332"


class IRCDispatcher:
    """Routes parsed messages to channels, the outbound queue or the log.

    Nothing raised while handling one line escapes ``process_line``: every
    problem becomes a diagnostics event and the line is dropped.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        outbound: ClosableQueue[str],
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.registry = registry
        self.outbound = outbound
        self.diagnostics = diagnostics or Diagnostics()
        self._handlers: dict[str, Callable[[IRCMessage], None]] = {
            RPL_TOPIC: self._handle_topic_reply,
            "TOPIC": self._handle_topic_change,
            "PRIVMSG": self._handle_privmsg,
            "PING": self._handle_ping,
        }

    def process_line(self, raw_line: str) -> IRCMessage | None:
        """Parse and dispatch one inbound line; the unit of work per line."""
        self.diagnostics.emit("irc", "raw", level=logging.DEBUG, line=raw_line.rstrip("\r\n"))
        try:
            message = parse_irc_message(raw_line)
        except ParseError as e:
            self.diagnostics.emit(
                "irc",
                "parse_error",
                level=logging.WARNING,
                error=e,
                kind=e.kind.value,
                line=raw_line,
            )
            return None
        try:
            self.dispatch(message)
        except QueueClosed as e:
            self.diagnostics.emit(
                "irc", "delivery_closed", level=logging.DEBUG, error=e, command=message.command
            )
        except Exception as e:  # noqa: BLE001
            self.diagnostics.emit(
                "irc",
                "dispatch_error",
                level=logging.ERROR,
                error=e,
                command=message.command,
                error_type=type(e).__name__,
                detail=str(e),
            )
        return message

    def dispatch(self, message: IRCMessage) -> None:
        handler = self._handlers.get(message.command)
        if handler is None:
            self.diagnostics.emit(
                "irc",
                "unhandled",
                level=logging.DEBUG,
                prefix=message.prefix,
                command=message.command,
            )
            return
        handler(message)

    def _handle_topic_reply(self, message: IRCMessage) -> None:
        # <me> <channel> :<topic>
        split = split_first_token(message.params)
        if split is None:
            self._missing_field(message, "target")
            return
        _, rest = split
        split = split_first_token(rest)
        if split is None:
            self._missing_field(message, "channel")
            return
        channel_name = split[0].upper()
        topic = trailing_text(message.params)
        if topic is None:
            self._missing_field(message, "text")
            return
        self._set_topic(message, channel_name, topic)

    def _handle_topic_change(self, message: IRCMessage) -> None:
        # <channel> :<topic>
        split = split_first_token(message.params)
        if split is None:
            self._missing_field(message, "channel")
            return
        topic = trailing_text(message.params)
        if topic is None:
            self._missing_field(message, "text")
            return
        self._set_topic(message, split[0].upper(), topic)

    def _set_topic(self, message: IRCMessage, channel_name: str, topic: str) -> None:
        channel = self.registry.lookup(channel_name)
        if channel is None:
            self._routing_miss(message, channel_name)
            return
        channel.update_topic(topic)
        self.diagnostics.emit(
            "irc", "topic_update", channel=channel.name, topic=topic, setter=message.prefix
        )

    def _handle_privmsg(self, message: IRCMessage) -> None:
        split = split_first_token(message.params)
        if split is None:
            self._missing_field(message, "target")
            return
        target = split[0].upper()
        text = trailing_text(message.params)
        if text is None:
            self._missing_field(message, "text")
            return
        channel = self.registry.lookup(target)
        if channel is None:
            self._routing_miss(message, target)
            return
        channel.deliver_text(text)
        self.diagnostics.emit(
            "irc",
            "text_delivered",
            level=logging.DEBUG,
            channel=channel.name,
            sender=message.prefix,
        )

    def _handle_ping(self, message: IRCMessage) -> None:
        payload = strip_trailing_marker(message.params)
        self.outbound.put_nowait(f"PONG {payload}" if payload else "PONG")
        self.diagnostics.emit("irc", "ping", level=logging.DEBUG, payload=payload)

    def _missing_field(self, message: IRCMessage, field_name: str) -> None:
        self.diagnostics.emit(
            "irc",
            "missing_field",
            level=logging.WARNING,
            command=message.command,
            field=field_name,
            params=message.params,
        )

    def _routing_miss(self, message: IRCMessage, target: str) -> None:
        self.diagnostics.emit(
            "irc",
            "routing_miss",
            level=logging.WARNING,
            error=RoutingMiss(message.command, target),
            command=message.command,
            target=target,
        )

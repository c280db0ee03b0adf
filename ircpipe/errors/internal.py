"""Centralized internal error hierarchy.

These exceptions give the message pipeline semantic categories that decide
whether a failure is recovered locally or surfaced to the caller.

Classes:
  InternalError        – Base for all internal errors.
  ParseError           – One inbound line could not be parsed (local, non-fatal).
  RoutingMiss          – A topic/text reply names an unregistered channel (non-fatal).
  NetworkError         – Transport level failures.
  ConnectError         – The transport could not be opened (fatal for connect()).
  TransportError       – Read/write failure on an open transport (fatal for the client).
  QueueClosed          – A closed outbound or channel queue was used.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ParseErrorKind(Enum):
    EMPTY = "empty"
    MISSING_COMMAND = "missing_command"
    MALFORMED_PREFIX = "malformed_prefix"
    UNTERMINATED = "unterminated"


_PARSE_MESSAGES = {
    ParseErrorKind.EMPTY: "Empty IRC message",
    ParseErrorKind.MISSING_COMMAND: "No command token in IRC message",
    ParseErrorKind.MALFORMED_PREFIX: "Expected a command after the prefix",
    ParseErrorKind.UNTERMINATED: "IRC message not terminated",
}


class ParseError(InternalError):
    """Raised by the parser when a raw line cannot become a message.

    Recovered by the read pump: the line is logged and discarded so a single
    malformed line never interrupts the stream.

    Attributes:
        kind: Which structural rule the line violated.
        raw: The offending line.
    """

    def __init__(self, kind: ParseErrorKind, raw: str = "") -> None:
        super().__init__(_PARSE_MESSAGES[kind], data={"kind": kind.value, "raw": raw})
        self.kind = kind
        self.raw = raw


class RoutingMiss(InternalError):
    """A channel-scoped reply targeted a channel that was never joined."""

    def __init__(self, command: str, target: str) -> None:
        super().__init__(
            f"No joined channel {target} for {command}",
            data={"command": command, "target": target},
        )
        self.command = command
        self.target = target


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors."""


class ConnectError(NetworkError):
    """The transport could not be established.

    Surfaced to the caller of ``connect()`` as a hard failure.
    """


class TransportError(NetworkError):
    """A read or write on an established transport failed.

    Terminates the pump that hit it; the client is no longer usable.
    """


class QueueClosed(InternalError):
    """Raised when a closed queue is read from or written to."""

    def __init__(self, message: str = "Queue is closed") -> None:
        super().__init__(message)


__all__ = [
    "InternalError",
    "ParseError",
    "ParseErrorKind",
    "RoutingMiss",
    "NetworkError",
    "ConnectError",
    "TransportError",
    "QueueClosed",
]

"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSED = auto()


@dataclass(frozen=True, slots=True)
class IRCMessage:
    """One parsed protocol line.

    ``params`` is the text after the command token with the line terminator
    removed; its inner structure is left to the dispatcher.
    """

    raw: str
    prefix: str
    command: str
    params: str = ""


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """A non-fatal pipeline observation published on the diagnostics channel."""

    domain: str
    action: str
    context: dict[str, object] = field(default_factory=dict)
    error: BaseException | None = None

    @property
    def name(self) -> str:
        return f"{self.domain}_{self.action}"

"""ircpipe: asyncio client engine for line-oriented IRC-style chat servers."""

from .config import ClientCfg  # noqa: F401
from .errors import (  # noqa: F401
    ConnectError,
    ParseError,
    ParseErrorKind,
    QueueClosed,
    RoutingMiss,
    TransportError,
)
from .irc import Channel, ChatClient, IRCMessage, connect, parse_irc_message  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "ChatClient",
    "ClientCfg",
    "ConnectError",
    "IRCMessage",
    "ParseError",
    "ParseErrorKind",
    "QueueClosed",
    "RoutingMiss",
    "TransportError",
    "connect",
    "parse_irc_message",
]

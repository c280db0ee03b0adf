"""IRC subsystem package.

Contains the parser, dispatcher, channel registry, diagnostics channel and
the connection-owning client.
"""

from .channel import Channel, TopicSlot, normalize_channel_name  # noqa: F401
from .client import ChatClient, connect  # noqa: F401
from .diagnostics import Diagnostics  # noqa: F401
from .dispatcher import RPL_TOPIC, IRCDispatcher  # noqa: F401
from .models import ConnectionState, DiagnosticEvent, IRCMessage  # noqa: F401
from .parser import parse_irc_message  # noqa: F401
from .queues import ClosableQueue  # noqa: F401
from .registry import ChannelRegistry  # noqa: F401

__all__ = [
    "Channel",
    "ChannelRegistry",
    "ChatClient",
    "ClosableQueue",
    "ConnectionState",
    "DiagnosticEvent",
    "Diagnostics",
    "IRCDispatcher",
    "IRCMessage",
    "RPL_TOPIC",
    "TopicSlot",
    "connect",
    "normalize_channel_name",
    "parse_irc_message",
]

"""Error taxonomy and structured error logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ConnectError,
    InternalError,
    NetworkError,
    ParseError,
    ParseErrorKind,
    QueueClosed,
    RoutingMiss,
    TransportError,
)

__all__ = [
    "InternalError",
    "ParseError",
    "ParseErrorKind",
    "RoutingMiss",
    "NetworkError",
    "ConnectError",
    "TransportError",
    "QueueClosed",
    "classify_error",
    "log_error",
]

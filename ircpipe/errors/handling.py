from __future__ import annotations

import logging

from ..logging_config import log_structured_error
from .internal import (
    ConnectError,
    InternalError,
    NetworkError,
    ParseError,
    QueueClosed,
    RoutingMiss,
    TransportError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception onto the category name used by structured logging."""
    if isinstance(error, ConnectError):
        return "connect"
    if isinstance(error, TransportError | NetworkError | OSError | ConnectionError):
        return "network"
    if isinstance(error, ParseError):
        return "parsing"
    if isinstance(error, RoutingMiss):
        return "routing"
    if isinstance(error, QueueClosed):
        return "closed"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, object] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging. The
            exception's own ``data`` mapping is merged underneath it.
        level: Logging level, ERROR unless the caller knows better.
    """
    merged: dict[str, object] = {}
    if isinstance(error, InternalError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error,
        context=merged or None,
        level=level,
    )


__all__ = ["classify_error", "log_error"]

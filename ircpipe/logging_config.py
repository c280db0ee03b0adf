"""
Console logging setup and categorized error reporting for ircpipe.

``configure_logging`` installs a single colorlog handler on stderr. Every
structured error goes to the ``ircpipe.errors`` logger and is tallied per
category so the CLI can print a short report when it exits.
"""

import atexit
import logging
import os
import sys
import threading
from collections import Counter
from typing import Any

import colorlog

CONSOLE_FORMAT = "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message)s"
DATE_FORMAT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

errors_logger = logging.getLogger("ircpipe.errors")


def debug_enabled(env=None) -> bool:
    env = os.environ if env is None else env
    return env.get("DEBUG", "").lower() in ("true", "1", "yes")


class ErrorTally:
    """Per-category error counts with the most recent message of each."""

    def __init__(self):
        self.counts: Counter[str] = Counter()
        self.last_message: dict[str, str] = {}
        # Dispatch tasks and the atexit hook may race on shutdown.
        self._lock = threading.Lock()

    def record(self, category: str, message: str) -> None:
        with self._lock:
            self.counts[category] += 1
            self.last_message[category] = message

    def summary(self) -> dict[str, tuple[int, str]]:
        with self._lock:
            return {
                category: (count, self.last_message[category])
                for category, count in self.counts.most_common()
            }

    def reset(self) -> None:
        with self._lock:
            self.counts.clear()
            self.last_message.clear()

    def report(self) -> None:
        summary = self.summary()
        if not summary:
            return
        errors_logger.warning("Errors during this session:")
        for category, (count, last) in summary.items():
            errors_logger.warning(f"  {category}: {count} (last: {last})")


error_tally = ErrorTally()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException = None,
    context: dict[str, Any] = None,
    level: int = logging.ERROR,
) -> None:
    """Log ``[CATEGORY] message | Exception: Name | Context: k=v`` and tally it."""
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v!r}" for k, v in context.items()))
    errors_logger.log(level, " | ".join(parts))
    error_tally.record(error_type, message)


def configure_logging(debug: bool | None = None, *, report_on_exit: bool = True) -> int:
    """Route all records to a coloured stderr handler.

    Args:
        debug: Force DEBUG on or off; ``None`` reads the ``DEBUG`` variable.
        report_on_exit: Print the error tally when the interpreter exits.

    Returns:
        The root log level that was applied.
    """
    if debug is None:
        debug = debug_enabled()
    level = logging.DEBUG if debug else logging.INFO

    handler = colorlog.StreamHandler(sys.stderr)
    handler.setFormatter(
        colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    if report_on_exit:
        atexit.register(error_tally.report)
    return level

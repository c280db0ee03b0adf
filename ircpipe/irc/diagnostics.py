"""Diagnostics side channel for non-fatal pipeline events.

Parse failures, routing misses, unhandled commands and transport errors are
logged through the project logger and also fanned out to any subscriber the
surrounding application registered, so it can react without scraping logs.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..logs.logger import logger
from .models import DiagnosticEvent

Subscriber = Callable[[DiagnosticEvent], Awaitable[None] | None]


class Diagnostics:
    def __init__(self, nick: str | None = None) -> None:
        self.nick = nick
        self._subscribers: list[Subscriber] = []
        # Retained subscriber tasks to prevent premature GC.
        self._tasks: set[asyncio.Task[Any]] = set()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber`` and return a callable that removes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def emit(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        *,
        error: BaseException | None = None,
        **context: object,
    ) -> DiagnosticEvent:
        event = DiagnosticEvent(domain, action, dict(context), error)
        logger.log_event(domain, action, level=level, nick=self.nick, **context)
        for subscriber in list(self._subscribers):
            self._notify(subscriber, event)
        return event

    def _notify(self, subscriber: Subscriber, event: DiagnosticEvent) -> None:
        try:
            result = subscriber(event)
        except Exception as e:  # noqa: BLE001
            self._log_subscriber_error(e)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log_subscriber_error(exc)

    def _log_subscriber_error(self, error: BaseException) -> None:
        logger.log_event(
            "diagnostics",
            "subscriber_error",
            level=logging.ERROR,
            nick=self.nick,
            error=str(error),
            error_type=type(error).__name__,
        )

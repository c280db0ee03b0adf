"""Async IRC client: owns the transport, the channel registry and both pumps."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config import ClientCfg
from ..constants import (
    CLOSE_TIMEOUT,
    CONNECT_TIMEOUT,
    LINE_TERMINATOR,
    READ_LIMIT,
    WIRE_ENCODING,
)
from ..errors import ConnectError, QueueClosed, TransportError, log_error
from ..logs.logger import logger
from .channel import Channel
from .diagnostics import Diagnostics
from .dispatcher import IRCDispatcher
from .models import ConnectionState
from .queues import ClosableQueue
from .registry import ChannelRegistry


class ChatClient:  # pylint: disable=too-many-instance-attributes
    """One connection to one server.

    The read pump turns every inbound line into its own dispatch task; the
    write pump drains the outbound queue onto the socket in FIFO order. A
    client is single-use: after ``close()`` create a new one to reconnect.
    """

    def __init__(self, cfg: ClientCfg):
        self.config = cfg
        self.outbound: ClosableQueue[str] = ClosableQueue()
        self.channels = ChannelRegistry(self.outbound)
        self.diagnostics = Diagnostics(cfg.nick)
        self.dispatcher = IRCDispatcher(self.channels, self.outbound, self.diagnostics)
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.state = ConnectionState.DISCONNECTED
        self._reader_task: asyncio.Task[None] | None = None
        self._writer_task: asyncio.Task[None] | None = None
        # Retained per-line dispatch tasks to prevent premature GC.
        self._dispatch_tasks: set[asyncio.Task[Any]] = set()
        self._pump_error: TransportError | None = None
        self._pumps_done = asyncio.Event()
        self._closing = False
        self._used = False

    @property
    def nickname(self) -> str:
        return self.config.nick

    @property
    def pending_dispatches(self) -> int:
        return len(self._dispatch_tasks)

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                nick=self.nickname,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    async def connect(self) -> None:
        """Open the transport, start both pumps and register NICK/USER.

        Raises:
            ConnectError: The client was already used, or the transport could
                not be opened within ``CONNECT_TIMEOUT``.
        """
        if self._used:
            raise ConnectError(
                "Client already used; create a new client to reconnect",
                data={"state": self.state.name},
            )
        self._used = True
        cfg = self.config
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event("irc", "connect_start", nick=self.nickname, network=cfg.network)
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(cfg.host, cfg.port, limit=READ_LIMIT),
                timeout=CONNECT_TIMEOUT,
            )
        except (OSError, TimeoutError) as e:
            error = ConnectError(
                f"Could not connect to {cfg.network}",
                data={"network": cfg.network, "timeout": CONNECT_TIMEOUT},
            )
            log_error("Connect failed", e, context=error.data)
            self._closing = True
            self.outbound.close()
            self._set_state(ConnectionState.CLOSED)
            raise error from e

        # Registration goes ahead of anything queued before connect().
        pending = self.outbound.drain_nowait()
        self.nick(cfg.nick)
        self.user(cfg.nick, cfg.display_name)
        for line in pending:
            self.send_raw(line)

        self._reader_task = asyncio.create_task(
            self._read_pump(), name=f"ircpipe-read-{self.nickname}"
        )
        self._writer_task = asyncio.create_task(
            self._write_pump(), name=f"ircpipe-write-{self.nickname}"
        )
        self._set_state(ConnectionState.CONNECTED)
        logger.log_event("irc", "connect_success", nick=self.nickname, network=cfg.network)

    async def close(self) -> None:
        """Close the transport and both queues. Safe to call repeatedly.

        In-flight dispatch tasks are not awaited.
        """
        if self._closing and self.state is ConnectionState.CLOSED:
            return
        self._closing = True
        self._set_state(ConnectionState.CLOSED)
        self.outbound.close()
        self.channels.close_all()

        if self.writer is not None:
            self.writer.close()
            try:
                await asyncio.wait_for(self.writer.wait_closed(), timeout=CLOSE_TIMEOUT)
            except (OSError, TimeoutError) as e:
                logger.log_event(
                    "irc",
                    "close_transport_error",
                    level=logging.DEBUG,
                    nick=self.nickname,
                    error=str(e),
                )

        pumps = [t for t in (self._reader_task, self._writer_task) if t is not None]
        for task in pumps:
            task.cancel()
        if pumps:
            await asyncio.gather(*pumps, return_exceptions=True)
        self._pumps_done.set()
        logger.log_event("irc", "closed", nick=self.nickname)

    async def wait_closed(self) -> None:
        """Wait until the read pump has stopped.

        Raises:
            TransportError: The pump stopped because the connection failed.
        """
        if self._reader_task is None and not self._closing:
            return
        await self._pumps_done.wait()
        if self._pump_error is not None:
            raise self._pump_error

    async def __aenter__(self) -> ChatClient:
        if not self._used:
            await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def send_raw(self, line: str) -> None:
        """Queue one already formatted command line for the write pump."""
        self.outbound.put_nowait(line)

    def nick(self, nick: str) -> None:
        self.send_raw(f"NICK {nick}")

    def user(self, nick: str, realname: str) -> None:
        self.send_raw(f"USER {nick} 0 * :{realname}")

    def pong(self, payload: str = "") -> None:
        self.send_raw(f"PONG {payload}" if payload else "PONG")

    def privmsg(self, target: str, text: str) -> None:
        for line in text.splitlines() or [""]:
            self.send_raw(f"PRIVMSG {target} :{line}")

    def join(self, name: str) -> Channel:
        """Register ``name`` (once) and queue a JOIN for it (every call).

        Raises:
            QueueClosed: The client has been closed.
        """
        if self.outbound.closed:
            raise QueueClosed("Client is closed")
        channel, created = self.channels.add(name)
        self.send_raw(f"JOIN {channel.name}")
        logger.log_event(
            "irc",
            "join" if created else "join_repeat",
            level=logging.INFO if created else logging.DEBUG,
            nick=self.nickname,
            channel=channel.name,
        )
        return channel

    def lookup(self, name: str) -> Channel | None:
        return self.channels.lookup(name)

    async def _read_pump(self) -> None:
        reader = self.reader
        assert reader is not None
        # Set while skipping the rest of a line longer than READ_LIMIT.
        discarding = False
        try:
            while True:
                try:
                    data = await reader.readuntil(b"\n")
                except asyncio.LimitOverrunError as e:
                    if not discarding:
                        discarding = True
                        self.diagnostics.emit(
                            "irc", "line_too_long", level=logging.WARNING, limit=READ_LIMIT
                        )
                    await reader.readexactly(e.consumed)
                    continue
                except asyncio.IncompleteReadError as e:
                    if e.partial and not discarding:
                        self._spawn_dispatch(e.partial.decode(WIRE_ENCODING, errors="replace"))
                    raise TransportError("Connection closed by server") from None
                except OSError as e:
                    raise TransportError(
                        "Read from server failed", data={"error": str(e)}
                    ) from e
                if discarding:
                    discarding = False
                    continue
                self._spawn_dispatch(data.decode(WIRE_ENCODING, errors="replace"))
        except TransportError as e:
            if not self._closing:
                self._fail(e, "read_error")
        finally:
            if not self._closing:
                self._pumps_done.set()

    def _spawn_dispatch(self, line: str) -> None:
        task = asyncio.create_task(self._dispatch_line(line))
        self._dispatch_tasks.add(task)
        task.add_done_callback(self._dispatch_tasks.discard)

    async def _dispatch_line(self, line: str) -> None:
        self.dispatcher.process_line(line)

    async def _write_pump(self) -> None:
        writer = self.writer
        assert writer is not None
        try:
            async for line in self.outbound:
                writer.write(f"{line}{LINE_TERMINATOR}".encode(WIRE_ENCODING))
                await writer.drain()
                logger.log_event(
                    "irc", "send", level=logging.DEBUG, nick=self.nickname, line=line
                )
        except OSError as e:
            if not self._closing:
                self._fail(
                    TransportError("Write to server failed", data={"error": str(e)}),
                    "write_error",
                )

    def _fail(self, error: TransportError, action: str) -> None:
        """Record a fatal pump error and release everything blocked on the client."""
        if self._pump_error is None:
            self._pump_error = error
        self.diagnostics.emit(
            "irc", action, level=logging.WARNING, error=error, detail=str(error)
        )
        log_error("Transport failure", error, context={"nick": self.nickname})
        self.outbound.close()
        self.channels.close_all()
        self._set_state(ConnectionState.DISCONNECTED)
        self._pumps_done.set()


async def connect(cfg: ClientCfg) -> ChatClient:
    """Create a client for ``cfg`` and connect it.

    Raises:
        ConnectError: The transport could not be opened.
    """
    client = ChatClient(cfg)
    await client.connect()
    return client

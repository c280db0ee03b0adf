import asyncio
import os

# Keep connect/close fast when a test hits a dead address
os.environ.setdefault("CONNECT_TIMEOUT", "2")
os.environ.setdefault("CLOSE_TIMEOUT", "1")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from ircpipe.config import ClientCfg  # noqa: E402
from ircpipe.irc.diagnostics import Diagnostics  # noqa: E402
from ircpipe.irc.dispatcher import IRCDispatcher  # noqa: E402
from ircpipe.irc.models import DiagnosticEvent  # noqa: E402
from ircpipe.irc.queues import ClosableQueue  # noqa: E402
from ircpipe.irc.registry import ChannelRegistry  # noqa: E402

WAIT = 2.0


class FakeServer:
    """In-process line server standing in for the chat server.

    Records every line the client writes and lets a test push lines back.
    """

    def __init__(self) -> None:
        self.lines: asyncio.Queue[str] = asyncio.Queue()
        self.connected = asyncio.Event()
        self.writer: asyncio.StreamWriter | None = None
        self.server: asyncio.base_events.Server | None = None
        self.port = 0

    async def start(self) -> None:
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.writer = writer
        self.connected.set()
        try:
            while True:
                data = await reader.readline()
                if not data:
                    break
                await self.lines.put(data.decode("utf-8"))
        except (ConnectionError, OSError):
            pass

    async def send(self, line: str) -> None:
        await asyncio.wait_for(self.connected.wait(), WAIT)
        assert self.writer is not None
        self.writer.write(line.encode("utf-8"))
        await self.writer.drain()

    async def expect(self, timeout: float = WAIT) -> str:
        return await asyncio.wait_for(self.lines.get(), timeout)

    async def expect_registration(self, nick: str = "tester") -> None:
        assert await self.expect() == f"NICK {nick}\n"
        assert await self.expect() == f"USER {nick} 0 * :{nick}\n"

    async def disconnect(self) -> None:
        if self.writer is not None:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def stop(self) -> None:
        await self.disconnect()
        if self.server is not None:
            self.server.close()
            try:
                await asyncio.wait_for(self.server.wait_closed(), WAIT)
            except TimeoutError:
                pass


@pytest_asyncio.fixture
async def fake_server():
    server = FakeServer()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def server_cfg(fake_server) -> ClientCfg:
    return ClientCfg(network=f"127.0.0.1:{fake_server.port}", nick="tester")


@pytest.fixture
def events() -> list[DiagnosticEvent]:
    return []


@pytest.fixture
def pipeline(events):
    """Registry, outbound queue and dispatcher wired together without a socket."""
    outbound: ClosableQueue[str] = ClosableQueue()
    registry = ChannelRegistry(outbound)
    diagnostics = Diagnostics("tester")
    diagnostics.subscribe(events.append)
    dispatcher = IRCDispatcher(registry, outbound, diagnostics)
    return registry, outbound, dispatcher

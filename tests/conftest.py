import asyncio
from typing import Optional

import pytest_asyncio
from aiohttp import WSMsgType, web

from samsung_remote.constants import CONTROL_CHANNEL_PATH


class FakeTV:
    """Local stand-in for the television's control channel."""

    def __init__(self, port: int) -> None:
        self.port = port
        self.received: list[str] = []
        self.close_codes: list[Optional[int]] = []
        self.sockets: list[web.WebSocketResponse] = []
        self.connections = 0
        self.ack: Optional[str] = None
        self.greeting: Optional[str | bytes] = None
        self.close_first = 0

    async def handle(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self.connections += 1
        self.sockets.append(ws)

        if self.close_first >= self.connections:
            await ws.close()
            return ws

        if isinstance(self.greeting, bytes):
            await ws.send_bytes(self.greeting)
        elif self.greeting is not None:
            await ws.send_str(self.greeting)

        async for message in ws:
            if message.type == WSMsgType.TEXT:
                self.received.append(message.data)
                if self.ack is not None:
                    await ws.send_str(self.ack)

        self.close_codes.append(ws.close_code)
        return ws


@pytest_asyncio.fixture
async def tv_server(unused_tcp_port_factory):
    port = unused_tcp_port_factory()
    tv = FakeTV(port)

    app = web.Application()
    app.router.add_get(CONTROL_CHANNEL_PATH, tv.handle)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()

    try:
        yield tv
    finally:
        for ws in tv.sockets:
            if not ws.closed:
                await ws.close()
        await runner.cleanup()


@pytest_asyncio.fixture
async def silent_server(unused_tcp_port_factory):
    """Accepts TCP connections but never answers the WebSocket upgrade."""

    port = unused_tcp_port_factory()

    async def handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        while await reader.read(1024):
            pass
        writer.close()

    server = await asyncio.start_server(handler, "127.0.0.1", port)
    try:
        yield port
    finally:
        server.close()

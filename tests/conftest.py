"""Shared fixtures: a local aiohttp server that records what it receives."""

import json
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from restclient import RestClient


@dataclass
class RecordedRequest:
    """A request as seen by the test server."""

    method: str
    path: str
    body: bytes


@dataclass
class RecordingServer:
    """
    Answers every path with a canned response and records each request.

    Paths without a canned response get a 404 with a JSON error body.
    """

    port: int = 0
    requests: list[RecordedRequest] = field(default_factory=list)
    routes: dict[str, tuple[int, bytes]] = field(default_factory=dict)
    truncated: dict[str, tuple[int, bytes]] = field(default_factory=dict)

    def respond(self, path: str, status: int = 200, body: Any = None, raw: bytes | None = None) -> None:
        """Set the response for a path: JSON-encoded body, or raw bytes."""
        self.routes[path] = (status, raw if raw is not None else json.dumps(body).encode("utf-8"))

    def truncate(self, path: str, status: int, partial: bytes) -> None:
        """Announce a longer body than is sent for a path, then drop the connection."""
        self.truncated[path] = (status, partial)

    async def handle(self, request: web.Request) -> web.StreamResponse:
        body = await request.read()
        self.requests.append(RecordedRequest(request.method, request.path, body))
        if request.path in self.truncated:
            return await self._handle_truncated(request)
        status, payload = self.routes.get(request.path, (404, b'{"error": "not found"}'))
        return web.Response(status=status, body=payload, content_type="application/json")

    async def _handle_truncated(self, request: web.Request) -> web.StreamResponse:
        status, partial = self.truncated[request.path]
        response = web.StreamResponse(status=status, headers={"Content-Length": str(len(partial) + 100)})
        response.force_close()
        await response.prepare(request)
        await response.write(partial)
        return response


@pytest_asyncio.fixture
async def server():
    recorder = RecordingServer()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", recorder.handle)
    test_server = TestServer(app, host="127.0.0.1")
    await test_server.start_server()
    recorder.port = test_server.port
    yield recorder
    await test_server.close()


@pytest_asyncio.fixture
async def client(server):
    async with RestClient("127.0.0.1", server.port) as rest_client:
        yield rest_client

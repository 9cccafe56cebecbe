"""
Caller-owned handle to a live response body.
"""

import json
from collections.abc import AsyncIterator
from typing import Any

import aiohttp


class ResponseStream:
    """
    Live response body returned by RestClient.do_stream.

    The underlying connection stays checked out until close() is called,
    either directly or by leaving an ``async with`` block:

        reply = await client.do_stream("GET", "/export")
        async with reply.stream as stream:
            async for chunk in stream.iter_chunked(4096):
                ...
    """

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response

    @property
    def response(self) -> aiohttp.ClientResponse:
        """The wrapped aiohttp response."""
        return self._response

    @property
    def closed(self) -> bool:
        return self._response.closed

    async def read(self) -> bytes:
        """Read the remaining body."""
        return await self._response.read()

    async def json(self) -> Any:
        """Read the remaining body and decode it as JSON."""
        return json.loads(await self._response.read())

    async def iter_chunked(self, n: int) -> AsyncIterator[bytes]:
        """Yield the body in chunks of at most n bytes."""
        async for chunk in self._response.content.iter_chunked(n):
            yield chunk

    def close(self) -> None:
        """Release the underlying connection."""
        self._response.release()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()

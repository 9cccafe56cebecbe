"""
Example demonstrating JSON and streaming requests with restclient.

Talks to an httpbin-compatible service (https://httpbin.org by default;
set HTTPBIN_HOST, HTTPBIN_PORT and HTTPBIN_TLS in a .env file to point it
elsewhere). 404 responses are turned into a domain error; everything else
is returned as is.
"""

import asyncio
import os
from dataclasses import dataclass
from logging import basicConfig
from logging import getLogger
from typing import Any

import aiohttp
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from restclient import Raw
from restclient import RestClient
from restclient import Value

load_dotenv()

logger = getLogger(__name__)
console = Console()


@dataclass
class Echo:
    """The parts of an httpbin echo we care about."""

    url: str
    json: Any = None


class NotFoundError(Exception):
    """Raised for 404 responses."""


def not_found(request: aiohttp.RequestInfo, response: aiohttp.ClientResponse) -> Exception:
    return NotFoundError(f"{request.method} {request.url} was not found")


async def main() -> None:
    client = RestClient(
        os.getenv("HTTPBIN_HOST", "httpbin.org"),
        int(os.getenv("HTTPBIN_PORT", "443")),
        use_tls=os.getenv("HTTPBIN_TLS", "1") == "1",
    )
    client.set_error_constructor({404}, not_found)

    async with client:
        reply = await client.do("POST", "/anything", Value({"query": "my cool tracks"}), into=Echo)
        console.print(f"[bold]POST[/bold] {reply.status}: {reply.value}")

        stream_reply = await client.do_stream("PUT", "anything", Raw(b"raw bytes, sent verbatim"))
        async with stream_reply.stream as stream:
            body = await stream.read()
        console.print(f"[bold]PUT[/bold] {stream_reply.status}: {len(body)} bytes")

        reply = await client.do("GET", "/status/500")
        console.print(f"[bold]GET[/bold] {reply.status}: not an error without a constructor")

        try:
            await client.do("GET", "/status/404")
        except NotFoundError as e:
            console.print(f"[red]{e}[/red]")

    console.print("\n[dim]Example complete.[/dim]")


if __name__ == "__main__":
    basicConfig(
        level="DEBUG",
        format="[%(name)s] %(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    asyncio.run(main())

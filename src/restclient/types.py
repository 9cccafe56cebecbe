"""
Core types for restclient.
"""

from collections.abc import AsyncIterable
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import IO
from typing import TYPE_CHECKING
from typing import Any

import aiohttp

if TYPE_CHECKING:
    from .http.stream import ResponseStream

# =============================================================================
# Request Payloads
# =============================================================================

RawBody = bytes | bytearray | IO[bytes] | AsyncIterable[bytes]


@dataclass(frozen=True)
class Raw:
    """
    Payload sent verbatim as the request body.

    No transformation is applied and no content type is assumed.
    """

    body: RawBody


@dataclass(frozen=True)
class Value:
    """Payload serialized to JSON before the request is sent."""

    obj: Any


Payload = Raw | Value

# =============================================================================
# Custom Error Handling
# =============================================================================

# Builds a domain error from the request and the raw response. May be a plain
# function or a coroutine function.
ErrorConstructor = Callable[
    [aiohttp.RequestInfo, aiohttp.ClientResponse],
    BaseException | Awaitable[BaseException],
]


@dataclass(frozen=True)
class ErrorPolicy:
    """
    Status codes that trigger the custom error constructor.

    A policy is never mutated; RestClient.set_error_constructor swaps in a
    new one.
    """

    status_codes: frozenset[int]
    constructor: ErrorConstructor

    def matches(self, status: int) -> bool:
        return status in self.status_codes


# =============================================================================
# Replies
# =============================================================================


@dataclass
class Reply:
    """
    Result of RestClient.do.

    value is None when no decode target was given.
    """

    status: int
    value: Any = None


@dataclass
class StreamReply:
    """
    Result of RestClient.do_stream.

    The caller owns the stream and must close it.
    """

    status: int
    stream: "ResponseStream"

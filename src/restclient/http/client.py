"""
Async REST client scoped to a single host, using aiohttp.

Request bodies are either sent verbatim (Raw) or encoded as JSON (Value).
Responses are decoded from JSON by do() or handed back as a live stream by
do_stream(). Responses whose status code is in a configured set are turned
into domain errors by a caller-supplied constructor.
"""

import asyncio
import inspect
import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

import aiohttp

from ..decoding import decode_json
from ..exceptions import PayloadEncodingError
from ..exceptions import TransportError
from ..types import ErrorConstructor
from ..types import ErrorPolicy
from ..types import Payload
from ..types import Raw
from ..types import Reply
from ..types import StreamReply
from ..types import Value
from .logger import RAW_BODY_PLACEHOLDER
from .stream import ResponseStream

if TYPE_CHECKING:
    from .logger import HTTPLogger

logger = logging.getLogger(__name__)

DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443

_TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class Client(Protocol):
    """Operations offered by a REST client bound to one host."""

    async def do(
        self,
        method: str,
        path: str,
        payload: Payload | None = None,
        into: Any = None,
    ) -> Reply:
        """Send a request and decode the JSON response into `into`."""
        ...

    async def do_stream(
        self,
        method: str,
        path: str,
        payload: Payload | None = None,
    ) -> StreamReply:
        """Send a request and return the response body as a stream."""
        ...

    def set_error_constructor(
        self,
        status_codes: Iterable[int],
        constructor: ErrorConstructor,
    ) -> None:
        """Replace the status codes and constructor used for custom errors."""
        ...


class RestClient:
    """
    REST client for a service at a fixed host, port and scheme.

    Example:
        async with RestClient("api.example.com", 443, use_tls=True) as client:
            reply = await client.do("POST", "/search", Value({"q": "x"}), into=dict)
            print(reply.status, reply.value)
    """

    def __init__(
        self,
        host: str,
        port: int,
        use_tls: bool = False,
        *,
        http_logger: "HTTPLogger | None" = None,
    ):
        """
        Initialize the client. No I/O is performed and nothing is validated.

        Args:
            host: Host name or address of the service
            port: TCP port of the service
            use_tls: Use https instead of http
            http_logger: Optional traffic logger
        """
        self._host = host
        self._port = port
        self._use_tls = use_tls
        self._http_logger = http_logger
        self._error_policy: ErrorPolicy | None = None
        self._session: aiohttp.ClientSession | None = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def use_tls(self) -> bool:
        return self._use_tls

    def __repr__(self) -> str:
        return f"RestClient({self.full_path('/')!r})"

    def set_http_logger(self, http_logger: "HTTPLogger | None") -> None:
        """Set the HTTP traffic logger."""
        self._http_logger = http_logger

    def set_error_constructor(
        self,
        status_codes: Iterable[int],
        constructor: ErrorConstructor,
    ) -> None:
        """
        Set the constructor used for responses with any of these status codes.

        Each call discards the previous status codes and constructor. An empty
        set of status codes disables custom errors, so every response is
        returned to the caller whatever its status.

        The constructor is called with the request info and the response, and
        returns the exception to raise. It may be a coroutine function. The
        response is released once the constructor returns. The exception is
        raised as returned, with a note giving the HTTP status added to it.

        Args:
            status_codes: Status codes that trigger the constructor
            constructor: Builds the error for a matching response
        """
        codes = frozenset(status_codes)
        self._error_policy = ErrorPolicy(codes, constructor) if codes else None

    def full_path(self, path: str) -> str:
        """
        Build the absolute URL for a request path.

        The port is left out when it is the default for the scheme, and a
        leading slash is added to the path if missing.
        """
        if self._use_tls:
            scheme, default_port = "https", DEFAULT_HTTPS_PORT
        else:
            scheme, default_port = "http", DEFAULT_HTTP_PORT

        port = "" if self._port == default_port else f":{self._port}"
        if not path.startswith("/"):
            path = "/" + path
        return f"{scheme}://{self._host}{port}{path}"

    async def do(
        self,
        method: str,
        path: str,
        payload: Payload | None = None,
        into: Any = None,
    ) -> Reply:
        """
        Send a request and decode the JSON response.

        Args:
            method: HTTP method
            path: Request path on the host
            payload: Raw body, Value to encode as JSON, or None for no body
            into: Decode target. A dataclass is filled recursively from its
                  type hints (unknown keys are ignored); generics such as
                  list[Item] or dict[str, int] check their items. None skips
                  decoding.

        Returns:
            Reply with the status code and the decoded value

        Raises:
            PayloadEncodingError: If the payload cannot be encoded; nothing is sent
            TransportError: If the request fails before the body is read
            DecodeError: If the body does not decode into `into`
        """
        response = await self._request(method, path, payload)
        try:
            body = await response.read()
        except _TRANSPORT_ERRORS as e:
            raise TransportError(f"Failed to read response: {e}", str(response.url), response.status) from e
        finally:
            response.release()

        if into is None:
            return Reply(response.status)
        return Reply(response.status, decode_json(body, into, response.status))

    async def do_stream(
        self,
        method: str,
        path: str,
        payload: Payload | None = None,
    ) -> StreamReply:
        """
        Send a request and return the response body unread.

        The caller owns the returned stream and must close it, or the
        connection is held until the stream is garbage collected.

        Raises:
            PayloadEncodingError: If the payload cannot be encoded; nothing is sent
            TransportError: If the request fails
        """
        response = await self._request(method, path, payload)
        return StreamReply(response.status, ResponseStream(response))

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        return self._session

    def _encode(self, payload: Payload | None) -> tuple[Any, Any]:
        """Return the request data and its loggable form."""
        if payload is None:
            return None, None
        if isinstance(payload, Raw):
            return payload.body, RAW_BODY_PLACEHOLDER
        if isinstance(payload, Value):
            try:
                data = json.dumps(payload.obj, allow_nan=False).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise PayloadEncodingError(f"Cannot encode payload as JSON: {e}") from e
            return data, payload.obj
        raise TypeError(f"payload must be Raw, Value or None, not {type(payload).__name__}")

    async def _request(self, method: str, path: str, payload: Payload | None) -> aiohttp.ClientResponse:
        data, logged_body = self._encode(payload)
        url = self.full_path(path)
        policy = self._error_policy

        logger.debug("%s %s (%s payload)", method, url, _payload_kind(payload))
        if self._http_logger:
            self._http_logger.log_request(method, url, logged_body)

        session = await self._get_session()
        try:
            response = await session.request(method, url, data=data)
        except _TRANSPORT_ERRORS as e:
            raise TransportError(f"Request failed: {str(e) or type(e).__name__}", url) from e
        except ValueError as e:
            # aiohttp rejects malformed methods and headers before connecting
            raise TransportError(f"Invalid request: {e}", url) from e

        logger.debug("%s %s -> %d", method, url, response.status)
        if self._http_logger:
            self._http_logger.log_response(url, response.status)

        if policy is not None and policy.matches(response.status):
            raise await self._custom_error(policy, response)
        return response

    async def _custom_error(self, policy: ErrorPolicy, response: aiohttp.ClientResponse) -> BaseException:
        try:
            error = policy.constructor(response.request_info, response)
            if inspect.isawaitable(error):
                error = await error
        finally:
            response.release()

        if not isinstance(error, BaseException):
            raise TypeError(f"error constructor returned {type(error).__name__}, expected an exception")
        error.add_note(f"HTTP status: {response.status}")
        return error


def _payload_kind(payload: Payload | None) -> str:
    if payload is None:
        return "no"
    return "raw" if isinstance(payload, Raw) else "json"



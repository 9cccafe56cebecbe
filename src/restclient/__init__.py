"""
restclient - a small async client for JSON REST APIs on a single host.

Payloads are sent either verbatim (Raw) or encoded as JSON (Value).
Responses are decoded from JSON with do() or returned as a caller-owned
stream with do_stream().

Example:
    from restclient import RestClient, Value

    async with RestClient("api.example.com", 443, use_tls=True) as client:
        reply = await client.do("POST", "/v1/items", Value({"name": "x"}), into=dict)
        print(reply.status, reply.value)
"""

from .exceptions import UNSET_STATUS
from .exceptions import DecodeError
from .exceptions import PayloadEncodingError
from .exceptions import RestClientError
from .exceptions import TransportError
from .http import DEFAULT_HTTP_PORT
from .http import DEFAULT_HTTPS_PORT
from .http import Client
from .http import FileHTTPLogger
from .http import HTTPLogger
from .http import ResponseStream
from .http import RestClient
from .types import ErrorConstructor
from .types import ErrorPolicy
from .types import Payload
from .types import Raw
from .types import Reply
from .types import StreamReply
from .types import Value

__all__ = [
    # Client
    "Client",
    "RestClient",
    "DEFAULT_HTTP_PORT",
    "DEFAULT_HTTPS_PORT",
    # Payloads and replies
    "Payload",
    "Raw",
    "Value",
    "Reply",
    "StreamReply",
    "ResponseStream",
    # Custom errors
    "ErrorConstructor",
    "ErrorPolicy",
    # Exceptions
    "UNSET_STATUS",
    "RestClientError",
    "PayloadEncodingError",
    "TransportError",
    "DecodeError",
    # Logging
    "HTTPLogger",
    "FileHTTPLogger",
]

__version__ = "0.1.0"

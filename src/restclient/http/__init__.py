"""HTTP submodule: client, response streams and traffic logging."""

from .client import DEFAULT_HTTP_PORT
from .client import DEFAULT_HTTPS_PORT
from .client import Client
from .client import RestClient
from .logger import FileHTTPLogger
from .logger import HTTPLogger
from .stream import ResponseStream

__all__ = [
    "DEFAULT_HTTPS_PORT",
    "DEFAULT_HTTP_PORT",
    "Client",
    "FileHTTPLogger",
    "HTTPLogger",
    "ResponseStream",
    "RestClient",
]

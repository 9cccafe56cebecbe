"""
Custom exceptions for restclient.
"""

# Status reported when no HTTP response was obtained.
UNSET_STATUS = -1


class RestClientError(Exception):
    """
    Base exception for all restclient errors.

    Attributes:
        status: The HTTP status code of the response, or UNSET_STATUS when
                the failure happened before a response was received.
    """

    def __init__(self, message: str, status: int = UNSET_STATUS):
        self.status = status
        super().__init__(message)


class PayloadEncodingError(RestClientError):
    """
    Raised when a Value payload cannot be serialized to JSON.

    No request is sent, so the status is always UNSET_STATUS. The
    original error from the json module is available as __cause__.
    """

    def __init__(self, message: str):
        super().__init__(message, UNSET_STATUS)


class TransportError(RestClientError):
    """
    Raised when the request could not be sent or the response not received.

    Covers DNS failures, refused connections, dropped connections and
    OS level timeouts.

    Attributes:
        url: The URL the request was addressed to.
    """

    def __init__(self, message: str, url: str, status: int = UNSET_STATUS):
        self.url = url
        super().__init__(f"{message} (url={url})", status)


class DecodeError(RestClientError):
    """
    Raised by RestClient.do when the response body does not decode into the target.

    Attributes:
        body: The raw response body.
    """

    def __init__(self, message: str, status: int, body: bytes):
        self.body = body
        super().__init__(f"HTTP {status}: {message}", status)

from enum import IntEnum


class ErrorKind(IntEnum):
    """Client-side failure kinds, numbered after the legacy negative return codes."""
    HOST = -1
    SOCKET = -2
    CONNECT = -3
    WRITE_HEADER = -4
    WRITE_BODY = -5
    READ_HEADER = -6
    PARSE_HEADER = -7
    NULL_ARGUMENT = -8
    NO_LENGTH = -9
    MEMORY = -10
    READ_BODY = -11
    URL_SCHEME = -12
    URL_PORT = -13
    INVALID_REQUEST = -14


class HttpTinyError(Exception):
    """Base exception for the httptiny library."""
    kind: ErrorKind | None = None

# --- Transport Errors ---

class TransportError(HttpTinyError):
    """A generic error occurred in the transport layer."""
    pass

class DnsFailureError(TransportError):
    kind = ErrorKind.HOST

class SocketCreateError(TransportError):
    kind = ErrorKind.SOCKET

class SocketConnectError(TransportError):
    kind = ErrorKind.CONNECT

class SocketWriteError(TransportError): pass
class SocketReadError(TransportError): pass
class ConnectionClosedError(TransportError): pass

# --- HTTP Client Errors ---

class HttpClientError(HttpTinyError):
    """A generic error occurred in the HTTP client logic."""
    pass

class HeaderWriteError(HttpClientError):
    kind = ErrorKind.WRITE_HEADER

class BodyWriteError(HttpClientError):
    kind = ErrorKind.WRITE_BODY

class HeaderReadError(HttpClientError):
    kind = ErrorKind.READ_HEADER

class HttpParseError(HttpClientError):
    kind = ErrorKind.PARSE_HEADER

class NullArgumentError(HttpClientError):
    kind = ErrorKind.NULL_ARGUMENT

class MissingLengthError(HttpClientError):
    kind = ErrorKind.NO_LENGTH

class BodyAllocationError(HttpClientError):
    kind = ErrorKind.MEMORY

class BodyReadError(HttpClientError):
    """The connection closed before the declared body length was received."""
    kind = ErrorKind.READ_BODY

    def __init__(self, message: str, received: int | None = None, expected: int | None = None):
        super().__init__(message)
        self.received = received
        self.expected = expected

class UrlParseError(HttpClientError): pass

class InvalidSchemeError(UrlParseError):
    kind = ErrorKind.URL_SCHEME

class InvalidPortError(UrlParseError):
    kind = ErrorKind.URL_PORT

class InvalidRequestError(HttpClientError):
    kind = ErrorKind.INVALID_REQUEST

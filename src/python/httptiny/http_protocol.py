from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Protocol

from .errors import InvalidRequestError

if TYPE_CHECKING:
    from .response_stream import ResponseStream


# --- Configuration ---
DEFAULT_PORT = 80
DEFAULT_USER_AGENT = "http-tiny/1.2"

# Serialization bounds, in bytes.
MAX_SERVER_LENGTH = 128
MAX_PATH_LENGTH = 256
MAX_TYPE_LENGTH = 64
MAX_LINE_LENGTH = 511


def bounded(value: str, limit: int | None = None) -> bytes:
    """Encode a header field, keeping at most ``limit`` bytes when a limit is given."""
    try:
        encoded = value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise InvalidRequestError(f"Header field is not latin-1 encodable: {value!r}") from e
    return encoded[:limit]


class HttpMethod(Enum):
    GET = "GET"
    PUT = "PUT"
    HEAD = "HEAD"
    DELETE = "DELETE"

@dataclass
class HttpRequest:
    """Caller-owned description of where a request goes.

    ``path`` carries no leading slash. The proxy fields are both set or both
    unset; when set, requests are sent to the proxy with an absolute-URI target.
    """
    host: str = ""
    port: int = DEFAULT_PORT
    proxy_host: str | None = None
    proxy_port: int | None = None
    user_agent: str = DEFAULT_USER_AGENT
    path: str = ""

    def __post_init__(self) -> None:
        self._check_proxy()

    @property
    def uses_proxy(self) -> bool:
        return bool(self.proxy_host) and bool(self.proxy_port)

    def set_proxy(self, host: str, port: int) -> None:
        if not host or not port:
            raise InvalidRequestError("A proxy needs both a host and a nonzero port.")
        self.proxy_host = host
        self.proxy_port = port

    def clear_proxy(self) -> None:
        self.proxy_host = None
        self.proxy_port = None

    def endpoint(self) -> tuple[str, int]:
        if self.uses_proxy:
            return self.proxy_host, self.proxy_port
        return self.host, self.port

    def validate(self) -> None:
        if not self.host:
            raise InvalidRequestError("Request has no target host.")
        if not 1 <= self.port <= 65535:
            raise InvalidRequestError(f"Target port {self.port} is out of range.")
        self._check_proxy()
        if self.proxy_port is not None and not 1 <= self.proxy_port <= 65535:
            raise InvalidRequestError(f"Proxy port {self.proxy_port} is out of range.")

    def release(self) -> None:
        self.host = ""
        self.path = ""
        self.user_agent = DEFAULT_USER_AGENT
        self.clear_proxy()

    def _check_proxy(self) -> None:
        if bool(self.proxy_host) != bool(self.proxy_port):
            raise InvalidRequestError("Proxy host and proxy port must be set together.")

@dataclass
class HttpResponse:
    status_code: int
    body: bytes = b""
    length: int | None = None
    content_type: str | None = None

class HttpProtocol(Protocol):
    def query(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]] | None = None,
        body: bytes = b"",
    ) -> int:
        ...

    def open_query(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]] | None = None,
    ) -> "ResponseStream":
        ...

# --- Status Codes ---
class HttpStatusCode(IntEnum):
    OK = 200
    CREATED = 201
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    REQUEST_TIMEOUT = 408
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503

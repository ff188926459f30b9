import logging
import re
from typing import Callable

from .transport import Transport
from .tcp_transport import TcpTransport
from .http_protocol import (
    HttpProtocol,
    HttpRequest,
    HttpMethod,
    bounded,
    MAX_SERVER_LENGTH,
    MAX_PATH_LENGTH,
    MAX_LINE_LENGTH,
)
from .reader import ReadResult, read_line, skip_line
from .response_stream import ResponseStream
from .errors import (
    HeaderWriteError,
    BodyWriteError,
    HeaderReadError,
    HttpParseError,
    SocketWriteError,
    SocketReadError,
)


logger = logging.getLogger(__name__)


class Http1Protocol(HttpProtocol):
    """One connection per request: connect, send, read the status line.

    ``query`` closes the connection before returning the status code.
    ``open_query`` hands the still-open connection back as a ResponseStream so
    the caller can consume the header block and body itself. Whatever fails
    along the way, the connection is closed before the error propagates.
    """
    _HTTP_VERSION = b"HTTP/1.0"
    _STATUS_LINE = re.compile(rb"HTTP/1\.\d+\s+(\d{3})")

    def __init__(self, transport_factory: Callable[[], Transport] = TcpTransport):
        self._transport_factory = transport_factory

    def query(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]] | None = None,
        body: bytes = b"",
    ) -> int:
        transport, status_code = self._exchange(request, method, headers or [], body)
        transport.close()
        return status_code

    def open_query(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]] | None = None,
    ) -> ResponseStream:
        transport, status_code = self._exchange(request, method, headers or [], b"")
        return ResponseStream(transport, status_code)

    def build_request_head(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]],
    ) -> bytes:
        path = bounded(request.path, MAX_PATH_LENGTH)
        if request.uses_proxy:
            server = bounded(request.host, MAX_SERVER_LENGTH)
            target = b"http://%s:%d/%s" % (server, request.port, path)
        else:
            target = b"/" + path

        buffer = bytearray()
        buffer += b"%s %s %s\r\n" % (method.value.encode("ascii"), target, self._HTTP_VERSION)
        buffer += b"User-Agent: %s\r\n" % bounded(request.user_agent)

        for key, value in headers:
            buffer += b"%s: %s\r\n" % (bounded(key), bounded(value))

        buffer += b"\r\n"
        return bytes(buffer)

    def _exchange(
        self,
        request: HttpRequest,
        method: HttpMethod,
        headers: list[tuple[str, str]],
        body: bytes,
    ) -> tuple[Transport, int]:
        request.validate()
        head = self.build_request_head(request, method, headers)
        host, port = request.endpoint()

        transport = self._transport_factory()
        transport.connect(host, port)

        try:
            self._send(transport, head, body)
            status_code = self._read_status(transport)
        except BaseException:
            transport.close()
            raise

        logger.debug("%s /%s -> %d via %s:%d", method.value, request.path, status_code, host, port)
        return transport, status_code

    def _send(self, transport: Transport, head: bytes, body: bytes) -> None:
        try:
            written = transport.write(head)
        except SocketWriteError as e:
            raise HeaderWriteError(f"Failed to send request header: {e}") from e
        if written != len(head):
            raise HeaderWriteError(f"Short write on request header: {written} of {len(head)} bytes.")

        if not body:
            return

        try:
            written = transport.write(body)
        except SocketWriteError as e:
            raise BodyWriteError(f"Failed to send request body: {e}") from e
        if written != len(body):
            raise BodyWriteError(f"Short write on request body: {written} of {len(body)} bytes.")

    def _read_status(self, transport: Transport) -> int:
        try:
            line = read_line(transport, MAX_LINE_LENGTH)
            if line.truncated:
                line = ReadResult(line.data, line.consumed, skip_line(transport).complete)
        except SocketReadError as e:
            raise HeaderReadError(f"Failed to read status line: {e}") from e

        if not line.complete or not line.data:
            raise HeaderReadError("Connection closed before a status line was received.")

        match = self._STATUS_LINE.match(line.data)
        if match is None:
            raise HttpParseError(f"Malformed status line: {bytes(line.data)!r}")
        return int(match.group(1))

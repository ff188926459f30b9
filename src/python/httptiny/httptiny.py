import logging
import re
from contextlib import contextmanager
from typing import Iterator

from .errors import (
    HttpTinyError,
    NullArgumentError,
    MissingLengthError,
    BodyAllocationError,
    BodyReadError,
    HeaderReadError,
    SocketReadError,
)
from .http1_protocol import Http1Protocol
from .http_protocol import (
    HttpProtocol,
    HttpRequest,
    HttpResponse,
    HttpMethod,
    HttpStatusCode,
    bounded,
    MAX_LINE_LENGTH,
    MAX_TYPE_LENGTH,
)
from .reader import ReadResult
from .response_stream import ResponseStream


logger = logging.getLogger(__name__)

_CONTENT_LENGTH = re.compile(rb"content-length:\s*([+-]?\d+)")
_CONTENT_TYPE = re.compile(rb"content-type:\s*(\S+)")


def _lower_key(line: bytes) -> bytes:
    key, sep, rest = line.partition(b":")
    return key.lower() + sep + rest


@contextmanager
def _logged(method: HttpMethod, request: HttpRequest | None) -> Iterator[None]:
    try:
        yield
    except HttpTinyError as e:
        path = request.path if request is not None else None
        kind = e.kind.name if e.kind is not None else "TRANSPORT"
        logger.warning("%s %r failed [%s]: %s", method.value, path, kind, e)
        raise


class HttpClient:
    def __init__(self, protocol: HttpProtocol | None = None):
        self._protocol = protocol if protocol is not None else Http1Protocol()

    def get(self, request: HttpRequest, type_capacity: int | None = MAX_TYPE_LENGTH) -> HttpResponse:
        """Fetch a resource body.

        Only a 200 answer is read further; any other status comes back with an
        empty body. A 200 answer must declare a positive Content-Length, and
        exactly that many bytes must arrive before the server closes.
        """
        with _logged(HttpMethod.GET, request):
            self._require(request)
            with self._protocol.open_query(request, HttpMethod.GET) as stream:
                if stream.status_code != HttpStatusCode.OK:
                    return HttpResponse(status_code=stream.status_code)

                length, content_type = self._read_header_block(stream, type_capacity)
                if length is None or length <= 0:
                    raise MissingLengthError(f"Missing or invalid Content-Length: {length}")

                try:
                    buffer = bytearray(length)
                except (MemoryError, OverflowError, ValueError) as e:
                    raise BodyAllocationError(f"Cannot allocate {length} bytes for the body.") from e

                try:
                    result = stream.read_exact(buffer)
                except SocketReadError as e:
                    raise BodyReadError(f"Failed to read body: {e}", expected=length) from e

                if not result.complete:
                    raise BodyReadError(
                        f"Body read stopped after {result.consumed} of {length} bytes.",
                        received=result.consumed,
                        expected=length,
                    )

                return HttpResponse(
                    status_code=stream.status_code,
                    body=bytes(buffer),
                    length=length,
                    content_type=content_type,
                )

    def head(self, request: HttpRequest, type_capacity: int | None = MAX_TYPE_LENGTH) -> HttpResponse:
        with _logged(HttpMethod.HEAD, request):
            self._require(request)
            with self._protocol.open_query(request, HttpMethod.HEAD) as stream:
                if stream.status_code != HttpStatusCode.OK:
                    return HttpResponse(status_code=stream.status_code)

                length, content_type = self._read_header_block(stream, type_capacity)
                return HttpResponse(
                    status_code=stream.status_code,
                    length=length,
                    content_type=content_type,
                )

    def put(
        self,
        request: HttpRequest,
        data: bytes,
        overwrite: bool = False,
        content_type: str | None = None,
    ) -> int:
        with _logged(HttpMethod.PUT, request):
            self._require(request)
            if data is None:
                raise NullArgumentError("put() needs data to send.")

            headers = [("Content-Length", str(len(data)))]
            if content_type is not None:
                headers.append(("Content-Type", bounded(content_type, MAX_TYPE_LENGTH).decode("latin-1")))
            if overwrite:
                headers.append(("Control", "overwrite=1"))

            return self._protocol.query(request, HttpMethod.PUT, headers, bytes(data))

    def delete(self, request: HttpRequest) -> int:
        with _logged(HttpMethod.DELETE, request):
            self._require(request)
            return self._protocol.query(request, HttpMethod.DELETE)

    @staticmethod
    def _require(request: HttpRequest | None) -> None:
        if request is None:
            raise NullArgumentError("A request descriptor is required.")

    @staticmethod
    def _read_header_block(
        stream: ResponseStream,
        type_capacity: int | None,
    ) -> tuple[int | None, str | None]:
        length: int | None = None
        content_type: str | None = None

        while True:
            try:
                line = stream.read_line(MAX_LINE_LENGTH)
                if line.truncated:
                    # Headers only need their first MAX_LINE_LENGTH bytes.
                    rest = stream.skip_line()
                    line = ReadResult(line.data, line.consumed + rest.consumed, rest.complete)
            except SocketReadError as e:
                raise HeaderReadError(f"Failed to read response header: {e}") from e

            if not line.complete:
                raise HeaderReadError("Connection closed inside the response header block.")
            if not line.data:
                return length, content_type

            normalized = _lower_key(line.data)

            match = _CONTENT_LENGTH.match(normalized)
            if match:
                length = int(match.group(1))

            if type_capacity is not None:
                match = _CONTENT_TYPE.match(normalized)
                if match:
                    content_type = match.group(1)[:type_capacity].decode("latin-1")

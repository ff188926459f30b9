import logging

from .errors import TransportError
from .reader import ReadResult, read_line, read_exact, skip_line
from .transport import Transport


logger = logging.getLogger(__name__)


class ResponseStream:
    """An open connection whose status line has already been read.

    Owning a ResponseStream means owning its transport: the holder must call
    ``close()`` exactly once, or use it as a context manager.
    """

    def __init__(self, transport: Transport, status_code: int):
        self._transport: Transport | None = transport
        self.status_code = status_code

    @property
    def closed(self) -> bool:
        return self._transport is None

    def read_line(self, limit: int) -> ReadResult:
        return read_line(self._require_open(), limit)

    def skip_line(self) -> ReadResult:
        return skip_line(self._require_open())

    def read_exact(self, buffer: bytearray | memoryview) -> ReadResult:
        return read_exact(self._require_open(), buffer)

    def close(self) -> None:
        if self._transport is not None:
            transport, self._transport = self._transport, None
            transport.close()
            logger.debug("Response stream closed (status %d)", self.status_code)

    def _require_open(self) -> Transport:
        if self._transport is None:
            raise TransportError("Cannot read from a closed response stream.")
        return self._transport

    def __enter__(self) -> "ResponseStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

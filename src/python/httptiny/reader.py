"""Blocking readers over a connected transport.

Both readers report success through ``ReadResult.complete`` rather than the
sign of a byte count, so an empty line and a connection that closed before
sending anything can never be confused.
"""
from dataclasses import dataclass

from .errors import ConnectionClosedError
from .transport import Transport


_CR = 0x0D
_LF = 0x0A


@dataclass(frozen=True)
class ReadResult:
    data: bytes | memoryview
    consumed: int
    complete: bool
    truncated: bool = False


def _recv(transport: Transport, view: memoryview) -> int:
    try:
        return transport.read_into(view)
    except ConnectionClosedError:
        return 0


def read_line(transport: Transport, limit: int) -> ReadResult:
    """Read one LF-terminated line, dropping CRs, storing at most ``limit`` bytes.

    The terminator is consumed but not stored. When ``limit`` bytes are stored
    before the LF arrives, the result is complete and ``truncated``: the rest
    of the line, terminator included, is still on the wire. Use ``skip_line``
    to discard it.
    """
    line = bytearray()
    octet = bytearray(1)
    view = memoryview(octet)
    consumed = 0

    while len(line) < limit:
        if _recv(transport, view) != 1:
            return ReadResult(bytes(line), consumed, complete=False)
        consumed += 1

        if octet[0] == _CR:
            continue
        if octet[0] == _LF:
            return ReadResult(bytes(line), consumed, complete=True)
        line += octet

    return ReadResult(bytes(line), consumed, complete=True, truncated=True)


def skip_line(transport: Transport) -> ReadResult:
    """Consume everything up to and including the next LF, storing nothing."""
    octet = bytearray(1)
    view = memoryview(octet)
    consumed = 0

    while True:
        if _recv(transport, view) != 1:
            return ReadResult(b"", consumed, complete=False)
        consumed += 1
        if octet[0] == _LF:
            return ReadResult(b"", consumed, complete=True)


def read_exact(transport: Transport, buffer: bytearray | memoryview) -> ReadResult:
    """Fill ``buffer`` completely, retrying short reads until the peer closes."""
    view = memoryview(buffer)
    wanted = len(view)
    received = 0

    while received < wanted:
        n = _recv(transport, view[received:])
        if n <= 0:
            break
        received += n

    return ReadResult(view[:received], received, complete=received == wanted)

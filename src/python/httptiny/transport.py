from typing import Protocol

class Transport(Protocol):
    def connect(self, host: str, port: int) -> None:
        """Resolve, create and connect; must leave nothing open when it raises."""
        ...

    def write(self, data: bytes) -> int:
        ...

    def read_into(self, buffer: bytearray | memoryview) -> int:
        """Return the number of bytes read, 0 once the peer has closed.

        A transport may raise ConnectionClosedError instead of returning 0;
        the readers treat both as the end of the stream. Any other failure is
        a SocketReadError.
        """
        ...

    def close(self) -> None:
        ...

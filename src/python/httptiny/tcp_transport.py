import logging
import socket

from .errors import (
    TransportError,
    DnsFailureError,
    SocketCreateError,
    SocketConnectError,
    SocketWriteError,
    SocketReadError,
)
from .transport import Transport


logger = logging.getLogger(__name__)


class TcpTransport(Transport):
    def __init__(self) -> None:
        self._sock: socket.socket | None = None

    def connect(self, host: str, port: int) -> None:
        if self._sock is not None:
            raise TransportError("Transport is already connected.")

        address = self._resolve(host, port)

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            raise SocketCreateError(f"Socket creation failed: {e}") from e

        try:
            sock.connect(address)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        except OSError as e:
            sock.close()
            raise SocketConnectError(f"Socket connection failed: {e}") from e

        self._sock = sock
        logger.debug("Connected to %s:%d (%s)", host, port, address[0])

    def write(self, data: bytes) -> int:
        if self._sock is None:
            raise TransportError("Cannot write on a disconnected transport.")

        try:
            self._sock.sendall(data)
        except OSError as e:
            raise SocketWriteError(f"Socket write failed: {e}") from e
        return len(data)

    def read_into(self, buffer: bytearray | memoryview) -> int:
        if self._sock is None:
            raise TransportError("Cannot read from a disconnected transport.")

        try:
            return self._sock.recv_into(buffer)
        except OSError as e:
            raise SocketReadError(f"Socket read failed: {e}") from e

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    @staticmethod
    def _resolve(host: str, port: int) -> tuple[str, int]:
        try:
            infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as e:
            raise DnsFailureError(f"DNS Failure for host '{host}'") from e

        if not infos:
            raise DnsFailureError(f"DNS Failure for host '{host}'")
        return infos[0][4]

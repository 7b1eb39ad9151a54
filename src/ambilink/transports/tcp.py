"""TCP socket transport."""

import logging
import socket

from ambilink.exceptions import ConnectError, SendError

from .base import Connection, Transport

logger = logging.getLogger(__name__)


class TcpConnection(Connection):
    """Connected TCP socket with bounded send/receive timeouts."""

    def __init__(self, sock: socket.socket, endpoint: str):
        self._sock = sock
        self._endpoint = endpoint
        self._open = True

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def is_connected(self) -> bool:
        return self._open

    def send(self, payload: bytes) -> None:
        if not self._open:
            raise SendError(self._endpoint, "connection is closed")
        try:
            self._sock.sendall(payload)
        except OSError as e:
            # Includes socket.timeout; the peer is gone or hung
            self.close()
            raise SendError(self._endpoint, str(e)) from e

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Peer already closed its side
            pass
        try:
            self._sock.close()
        except OSError as e:
            logger.error(f"Error closing socket to {self._endpoint}: {e}")


class TcpTransport(Transport):
    """Plain TCP client transport."""

    def __init__(self, host: str, port: int, io_timeout: float = 5.0):
        """
        Initialize TCP transport.

        Args:
            host: Peer host name or address
            port: Peer TCP port
            io_timeout: Send/receive timeout applied to every connection (seconds)
        """
        self._host = host
        self._port = port
        self._io_timeout = io_timeout

    @property
    def endpoint(self) -> str:
        return f"{self._host}:{self._port}"

    def connect(self, timeout: float) -> TcpConnection:
        try:
            sock = socket.create_connection((self._host, self._port), timeout=timeout)
        except OSError as e:
            raise ConnectError(self.endpoint, str(e)) from e

        # A hung peer must not block the sending thread forever
        sock.settimeout(self._io_timeout)
        logger.debug(f"TCP connection open: {self.endpoint}")
        return TcpConnection(sock, self.endpoint)

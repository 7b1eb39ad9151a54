"""Serial/COM port transport (pyserial)."""

import logging

import serial

from ambilink.exceptions import ConnectError, SendError

from .base import Connection, Transport

logger = logging.getLogger(__name__)


class SerialConnection(Connection):
    """Open serial port."""

    def __init__(self, port: serial.Serial):
        self._port = port
        self._failed = False

    @property
    def endpoint(self) -> str:
        return str(self._port.port)

    @property
    def is_connected(self) -> bool:
        return not self._failed and self._port.is_open

    def send(self, payload: bytes) -> None:
        if not self.is_connected:
            raise SendError(self.endpoint, "port is closed")
        try:
            self._port.write(payload)
            self._port.flush()
        except (serial.SerialException, OSError) as e:
            # SerialTimeoutException is a SerialException
            self._failed = True
            raise SendError(self.endpoint, str(e)) from e

    def close(self) -> None:
        try:
            self._port.close()
        except (serial.SerialException, OSError) as e:
            logger.error(f"Error closing serial port {self.endpoint}: {e}")


class SerialTransport(Transport):
    """Transport for LED controllers on a COM port."""

    def __init__(self, port: str, baudrate: int = 115200, io_timeout: float = 5.0):
        """
        Initialize serial transport.

        Args:
            port: Port name (e.g., "COM3" or "/dev/ttyUSB0")
            baudrate: Line speed
            io_timeout: Read/write timeout (seconds)
        """
        self._port = port
        self._baudrate = baudrate
        self._io_timeout = io_timeout

    @property
    def endpoint(self) -> str:
        return self._port

    def connect(self, timeout: float) -> SerialConnection:
        # Opening a local port does not block on a peer, so ``timeout`` only
        # bounds reads and writes together with io_timeout.
        try:
            port = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                timeout=min(timeout, self._io_timeout),
                write_timeout=self._io_timeout,
            )
        except (serial.SerialException, ValueError) as e:
            raise ConnectError(self._port, str(e)) from e

        logger.debug(f"Serial port open: {self._port} @ {self._baudrate}")
        return SerialConnection(port)

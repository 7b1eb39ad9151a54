"""Point-to-point channels to lighting targets."""

from .base import Connection, Transport
from .helper import HelperProcessTransport
from .serial_port import SerialConnection, SerialTransport
from .tcp import TcpConnection, TcpTransport

__all__ = [
    "Connection",
    "HelperProcessTransport",
    "SerialConnection",
    "SerialTransport",
    "TcpConnection",
    "TcpTransport",
    "Transport",
]

"""Tests for TCP, serial and helper-process transports."""

import socket
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import serial

from ambilink.exceptions import ConnectError, ExecutableNotFoundError, HelperNotRunningError, SendError
from ambilink.system import ProcessManager
from ambilink.transports import HelperProcessTransport, SerialTransport, TcpTransport


@pytest.fixture
def server():
    """Loopback TCP server socket."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    sock.settimeout(2)
    yield sock
    sock.close()


def free_port() -> int:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.mark.integration
class TestTcpTransport:
    """Real sockets on the loopback interface."""

    def test_send_reaches_peer(self, server):
        port = server.getsockname()[1]
        transport = TcpTransport("127.0.0.1", port)

        connection = transport.connect(timeout=2)
        peer, _ = server.accept()
        try:
            connection.send(b"ATMOLIGHT,Power,ON")
            assert peer.recv(64) == b"ATMOLIGHT,Power,ON"
        finally:
            peer.close()
            connection.close()

        assert connection.endpoint == f"127.0.0.1:{port}"

    def test_refused_connection_raises_connect_error(self):
        transport = TcpTransport("127.0.0.1", free_port())

        with pytest.raises(ConnectError) as exc_info:
            transport.connect(timeout=1)

        assert exc_info.value.recoverable
        assert exc_info.value.endpoint == transport.endpoint

    def test_send_after_close_raises(self, server):
        transport = TcpTransport("127.0.0.1", server.getsockname()[1])
        connection = transport.connect(timeout=2)

        connection.close()
        connection.close()

        assert not connection.is_connected
        with pytest.raises(SendError):
            connection.send(b"x")


@pytest.mark.unit
class TestSerialTransport:
    """pyserial is mocked; no hardware needed."""

    def test_connect_opens_port_with_timeouts(self):
        with patch("ambilink.transports.serial_port.serial.Serial") as serial_cls:
            transport = SerialTransport("COM3", 57600, io_timeout=3.0)
            connection = transport.connect(timeout=1.0)

        serial_cls.assert_called_once_with(
            port="COM3", baudrate=57600, timeout=1.0, write_timeout=3.0
        )
        assert connection.endpoint == str(serial_cls.return_value.port)

    def test_open_failure_raises_connect_error(self):
        with patch(
            "ambilink.transports.serial_port.serial.Serial",
            side_effect=serial.SerialException("could not open port COM3"),
        ):
            with pytest.raises(ConnectError):
                SerialTransport("COM3").connect(timeout=1.0)

    def test_write_failure_raises_send_error(self):
        with patch("ambilink.transports.serial_port.serial.Serial") as serial_cls:
            port = serial_cls.return_value
            port.is_open = True
            port.write.side_effect = serial.SerialTimeoutException("Write timeout")
            connection = SerialTransport("COM3").connect(timeout=1.0)

        assert connection.is_connected
        with pytest.raises(SendError):
            connection.send(b"x\n")
        assert not connection.is_connected


@pytest.mark.unit
class TestHelperProcessTransport:
    """Helper launch before connecting."""

    def make(self, **kwargs):
        processes = Mock(spec=ProcessManager)
        processes.is_process_running.return_value = kwargs.pop("running", False)
        sleep = Mock()
        defaults = dict(
            host="127.0.0.1",
            port=20123,
            process_name="atmohue.exe",
            helper_path=Path("/opt/atmohue/atmohue.exe"),
            process_manager=processes,
            start_delay=5.0,
            sleep=sleep,
        )
        defaults.update(kwargs)
        return HelperProcessTransport(**defaults), processes, sleep

    def test_remote_helper_never_checked(self):
        transport, processes, _ = self.make(is_remote=True)
        transport.prepare()
        processes.is_process_running.assert_not_called()

    def test_running_helper_not_started(self):
        transport, processes, _ = self.make(running=True)
        transport.prepare()
        processes.start_process.assert_not_called()

    def test_starts_helper_and_waits(self):
        transport, processes, sleep = self.make()
        transport.prepare()

        processes.start_process.assert_called_once_with(Path("/opt/atmohue/atmohue.exe"))
        sleep.assert_called_once_with(5.0)

    def test_start_disabled_raises(self):
        transport, _, _ = self.make(start_helper=False)
        with pytest.raises(HelperNotRunningError):
            transport.prepare()

    def test_missing_helper_path_raises(self):
        transport, _, _ = self.make(helper_path=None)
        with pytest.raises(ExecutableNotFoundError):
            transport.prepare()

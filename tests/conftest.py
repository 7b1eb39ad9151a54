"""Pytest fixtures for tests."""

import threading

import numpy as np
import pytest

from ambilink.core import ConnectionSupervisor
from ambilink.exceptions import ConnectError, SendError
from ambilink.models import AppConfig, BridgeTargetConfig, FrameBuffer
from ambilink.transports import Connection, Transport


class FakeConnection(Connection):
    """In-memory connection that records what was sent."""

    def __init__(self, endpoint: str = "fake:1", fail_send: bool = False):
        self._endpoint = endpoint
        self._open = True
        self.fail_send = fail_send
        self.sent: list[bytes] = []
        self.close_calls = 0
        self.send_started = threading.Event()
        self.release = threading.Event()
        self.release.set()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def is_connected(self) -> bool:
        return self._open

    def send(self, payload: bytes) -> None:
        self.send_started.set()
        self.release.wait(timeout=5)
        if self.fail_send or not self._open:
            self._open = False
            raise SendError(self._endpoint, "broken pipe")
        self.sent.append(payload)

    def close(self) -> None:
        self.close_calls += 1
        self._open = False


class FakeTransport(Transport):
    """
    Transport handing out FakeConnections.

    ``fail_times`` connect attempts fail before one succeeds; ``None``
    makes every attempt fail.
    """

    def __init__(self, fail_times: int | None = 0, prepare_error: Exception | None = None):
        self.fail_times = fail_times
        self.prepare_error = prepare_error
        self.connect_calls = 0
        self.prepare_calls = 0
        self.connections: list[FakeConnection] = []
        self.next_fail_send = False
        self.connect_gate = threading.Event()
        self.connect_gate.set()

    @property
    def endpoint(self) -> str:
        return "fake:1"

    def prepare(self) -> None:
        self.prepare_calls += 1
        if self.prepare_error is not None:
            raise self.prepare_error

    def connect(self, timeout: float) -> FakeConnection:
        self.connect_calls += 1
        self.connect_gate.wait(timeout=5)
        if self.fail_times is None or self.connect_calls <= self.fail_times:
            raise ConnectError(self.endpoint, "connection refused")

        connection = FakeConnection(fail_send=self.next_fail_send)
        self.next_fail_send = False
        self.connections.append(connection)
        return connection

    @property
    def last_connection(self) -> FakeConnection:
        return self.connections[-1]


class SleepRecorder:
    """Sleep replacement that returns immediately and records delays."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_supervisor(sleep):
    """Build supervisors with fast defaults; shuts them down after the test."""
    created = []

    def factory(transport: Transport, **kwargs) -> ConnectionSupervisor:
        kwargs.setdefault("max_attempts", 3)
        kwargs.setdefault("reconnect_delay", 0.5)
        kwargs.setdefault("power_on_settle_delay", 2.0)
        kwargs.setdefault("sleep", sleep)
        supervisor = ConnectionSupervisor("test", transport, **kwargs)
        created.append(supervisor)
        return supervisor

    yield factory

    for supervisor in created:
        supervisor.shutdown()


@pytest.fixture
def app_config():
    """Config with an enabled bridge that never launches a helper."""
    return AppConfig(
        bridge=BridgeTargetConfig(enabled=True, is_remote_machine=True),
    )


def connect(handler, timeout: float = 2.0) -> None:
    """Initialise a handler and wait until its connect actions were sent."""
    assert handler.initialise()
    assert handler.supervisor.wait_for_connect(timeout)
    assert handler.supervisor.flush(timeout)


def solid_frame(rgb: tuple[int, int, int], width: int = 4, height: int = 3) -> FrameBuffer:
    """Frame filled with a single color."""
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = rgb
    return FrameBuffer.from_rgb_array(pixels)

"""Tests for the exception hierarchy, error handlers and observer utilities."""

import logging
import threading
from unittest.mock import Mock

import pytest

from ambilink.exceptions import (
    AmbilinkError,
    ConfigurationError,
    ConnectError,
    ErrorContext,
    ExecutableNotFoundError,
    HelperNotRunningError,
    ProcessError,
    SendError,
    TransportError,
    format_error_for_display,
    handle_errors,
)
from ambilink.utils import ObserverManager


@pytest.mark.unit
class TestHierarchy:
    """Messages and base classes."""

    def test_transport_errors_are_recoverable(self):
        error = ConnectError("127.0.0.1:20123", "Connection refused")
        assert isinstance(error, TransportError)
        assert error.recoverable
        assert str(error) == "Could not connect to 127.0.0.1:20123"
        assert error.technical_message == "Connect to 127.0.0.1:20123 failed: Connection refused"

    def test_send_error(self):
        error = SendError("COM3")
        assert isinstance(error, AmbilinkError)
        assert error.technical_message == "Send to COM3 failed"

    def test_missing_executable_without_path(self):
        error = ExecutableNotFoundError(None, "device toggling")
        assert isinstance(error, ConfigurationError)
        assert error.user_message == "No executable configured for device toggling"
        assert "Suggestion:" in error.get_full_message()

    def test_helper_not_running(self):
        error = HelperNotRunningError("atmohue.exe")
        assert isinstance(error, ProcessError)
        assert "start_helper" in error.recovery_hint

    def test_format_for_display(self):
        assert format_error_for_display(HelperNotRunningError("atmohue.exe"))[0] == "atmohue.exe is not running"
        assert format_error_for_display(ValueError("boom")) == ("ValueError: boom", None)


@pytest.mark.unit
class TestHandlers:
    """handle_errors and ErrorContext."""

    def test_handle_errors_returns_fallback(self):
        @handle_errors(operation_name="load", re_raise=False, fallback_value=[])
        def load():
            raise SendError("COM3")

        assert load() == []

    def test_handle_errors_reraises_by_default(self, caplog):
        @handle_errors(operation_name="load")
        def load():
            raise ValueError("bad")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                load()
        assert "Unexpected error during load: bad" in caplog.text

    def test_error_context_suppresses(self, caplog):
        with caplog.at_level(logging.ERROR):
            with ErrorContext("dispose bridge", re_raise=False) as ctx:
                raise ConnectError("fake:1")

        assert isinstance(ctx.error, ConnectError)
        assert "Failed to dispose bridge" in caplog.text

    def test_error_context_reraises(self):
        with pytest.raises(RuntimeError):
            with ErrorContext("dispose bridge"):
                raise RuntimeError("boom")


class Recorder:
    def __init__(self):
        self.events = []

    def on_target_event(self, event, target):
        self.events.append((event, target))


@pytest.mark.unit
class TestObserverManager:
    """Registration and error isolation."""

    def test_register_is_idempotent(self):
        observers = ObserverManager[Recorder]()
        recorder = Recorder()
        observers.register(recorder)
        observers.register(recorder)

        assert len(observers) == 1
        assert recorder in observers

    def test_failing_observer_does_not_stop_others(self):
        observers = ObserverManager[Recorder]()
        broken = Mock()
        broken.on_target_event.side_effect = RuntimeError("boom")
        recorder = Recorder()
        observers.register(broken)
        observers.register(recorder)

        observers.notify("on_target_event", "connected", "bridge")

        assert recorder.events == [("connected", "bridge")]

    def test_unregister_and_clear(self):
        observers = ObserverManager[Recorder]()
        first, second = Recorder(), Recorder()
        observers.register(first)
        observers.register(second)

        observers.unregister(first)
        assert first not in observers
        observers.clear()
        assert len(observers) == 0

    def test_shared_lock_is_used(self):
        shared = threading.Lock()
        observers = ObserverManager[Recorder](lock=shared)

        assert observers._lock is shared
        assert ObserverManager.__init__.__annotations__["lock"] == "Lock | None"

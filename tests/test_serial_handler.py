"""Tests for the serial LED controller handler."""

from unittest.mock import Mock

import pytest

from ambilink.models import AppConfig, ContentEffect, PowerMode, SerialTargetConfig, TargetId, TransportKind
from ambilink.system import DeviceToggler
from ambilink.targets import SerialTargetHandler

from conftest import FakeTransport, connect, solid_frame


@pytest.fixture
def make_serial(make_supervisor):
    created = []

    def factory(toggler=None, **kwargs):
        config = AppConfig(serial=SerialTargetConfig(enabled=True, port="COM7", **kwargs))
        transport = FakeTransport()
        handler = SerialTargetHandler(
            config, config.serial, make_supervisor(transport), device_toggler=toggler
        )
        created.append(handler)
        return handler, transport

    yield factory

    for handler in created:
        handler.dispose()


def wait_for_resume(handler: SerialTargetHandler) -> None:
    # Resume runs on the frame worker; a no-op task queued behind it marks its end
    handler._executor.submit(lambda: None).result(timeout=2)
    assert handler.supervisor.wait_for_connect(2)
    handler.supervisor.flush(2)


@pytest.mark.unit
class TestSerialHandler:
    """Line format and capabilities."""

    def test_info(self, make_serial):
        handler, _ = make_serial()
        assert handler.name is TargetId.SERIAL
        assert handler.info.transport_kind is TransportKind.SERIAL
        assert handler.info.allow_delay

    def test_commands_are_newline_terminated(self, make_serial):
        handler, transport = make_serial()
        connect(handler)

        assert transport.last_connection.sent == [b"ATMOLIGHT,Color,0,0,0,1,0\n"]

    def test_unsupported_effect_treated_as_undefined(self, make_serial):
        handler, transport = make_serial()
        connect(handler)

        assert handler.change_effect(ContentEffect.VU_METER)
        handler.supervisor.flush(2)

        assert transport.last_connection.sent[-1] == b"ATMOLIGHT,Color,0,0,0,1,0\n"
        assert handler.change_image(solid_frame((255, 0, 0))) is None

    def test_live_frame(self, make_serial):
        handler, transport = make_serial()
        connect(handler)

        handler.change_image(solid_frame((0, 255, 0))).result(timeout=2)
        handler.supervisor.flush(2)

        assert transport.last_connection.sent[-1] == b"ATMOLIGHT,Color,0,255,0,200,0\n"


@pytest.mark.unit
class TestSerialResume:
    """Port cycling on resume."""

    def test_resume_cycles_port_when_enabled(self, make_serial):
        toggler = Mock(spec=DeviceToggler)
        handler, transport = make_serial(toggler=toggler, reconnect_port_on_resume=True)
        connect(handler)

        handler.power_mode_changed(PowerMode.RESUME)
        wait_for_resume(handler)

        toggler.reconnect_port.assert_called_once_with("COM7")
        assert transport.connect_calls == 2

    def test_resume_without_port_cycling(self, make_serial):
        toggler = Mock(spec=DeviceToggler)
        handler, transport = make_serial(toggler=toggler)
        connect(handler)

        handler.power_mode_changed(PowerMode.RESUME)
        wait_for_resume(handler)

        toggler.reconnect_port.assert_not_called()
        assert transport.connect_calls == 2

    def test_resume_without_toggler_still_reconnects(self, make_serial):
        handler, transport = make_serial(reconnect_port_on_resume=True)
        connect(handler)

        handler.power_mode_changed(PowerMode.RESUME)
        wait_for_resume(handler)

        assert transport.connect_calls == 2

    def test_resume_closes_port_once_before_cycling(self, make_serial):
        toggler = Mock(spec=DeviceToggler)
        handler, transport = make_serial(toggler=toggler, reconnect_port_on_resume=True)
        connect(handler)
        first = transport.last_connection
        open_while_cycling = []
        toggler.reconnect_port.side_effect = lambda port: open_while_cycling.append(first.is_connected)
        handler.supervisor.disconnect = Mock(wraps=handler.supervisor.disconnect)

        handler.power_mode_changed(PowerMode.RESUME)
        wait_for_resume(handler)

        handler.supervisor.disconnect.assert_called_once()
        assert open_while_cycling == [False]
        assert first.close_calls == 1

"""LED controller on a serial/COM port."""

import logging

from ambilink.core import ConnectionSupervisor
from ambilink.exceptions import handle_errors
from ambilink.models import (
    AppConfig,
    ContentEffect,
    SerialTargetConfig,
    TargetId,
    TargetInfo,
    TransportKind,
)
from ambilink.system import DeviceToggler

from .base import TargetHandler

logger = logging.getLogger(__name__)

SERIAL_EFFECTS = frozenset({
    ContentEffect.GIF_READER,
    ContentEffect.LEDS_DISABLED,
    ContentEffect.LIVE_MODE,
    ContentEffect.STATIC_COLOR,
})


class SerialTargetHandler(TargetHandler):
    """
    Handler for a serial LED controller.

    Uses the bridge line format, one command per line. Some USB-serial
    adapters do not survive standby, so on resume the port can be cycled
    through a device toggler before reconnecting.
    """

    line_terminator = b"\n"

    def __init__(
        self,
        app_config: AppConfig,
        target_config: SerialTargetConfig,
        supervisor: ConnectionSupervisor,
        device_toggler: DeviceToggler | None = None,
    ):
        self._info = self.describe(target_config)
        self._serial_config = target_config
        self._toggler = device_toggler
        super().__init__(app_config, target_config, supervisor)

    @classmethod
    def describe(cls, target_config: SerialTargetConfig) -> TargetInfo:
        return TargetInfo(
            target=TargetId.SERIAL,
            transport_kind=TransportKind.SERIAL,
            supported_effects=SERIAL_EFFECTS,
            allow_delay=True,
        )

    @property
    def info(self) -> TargetInfo:
        return self._info

    def _resume(self) -> None:
        # Toggling sleeps, so the whole resume runs on the frame worker
        try:
            self._executor.submit(self._resume_sequence)
        except RuntimeError:
            logger.debug(f"{self.name.value} - Resume ignored, handler disposed")

    @handle_errors(operation_name="resume serial target", re_raise=False)
    def _resume_sequence(self) -> None:
        self._supervisor.disconnect()
        if self._serial_config.reconnect_port_on_resume:
            if self._toggler is None:
                logger.warning(f"{self.name.value} - No device toggler configured, port not cycled")
            else:
                self._toggler.reconnect_port(self._serial_config.port)
        self._reconnect_after_resume()

"""Build target handlers from configuration."""

import logging
import time
from collections.abc import Callable

from ambilink.core import ConnectionSupervisor
from ambilink.models import AppConfig, BridgeTargetConfig, SerialTargetConfig, TargetId, TargetInfo
from ambilink.system import DeviceToggler, ProcessManager
from ambilink.transports import HelperProcessTransport, SerialTransport

from .base import TargetHandler
from .bridge import BridgeTargetHandler
from .serial_controller import SerialTargetHandler

logger = logging.getLogger(__name__)


class TargetRegistry:
    """
    Creates fully wired handlers for the configured targets.

    Each handler gets its own transport and supervisor; the process manager
    is shared.
    """

    def __init__(
        self,
        config: AppConfig,
        process_manager: ProcessManager | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._processes = process_manager or ProcessManager()
        self._sleep = sleep

    def _supervisor(
        self, target: TargetId, target_config, transport, power_on_settle_delay: float = 0.0
    ) -> ConnectionSupervisor:
        return ConnectionSupervisor(
            name=target.value,
            transport=transport,
            max_attempts=target_config.reconnect_attempts,
            reconnect_delay=target_config.reconnect_delay,
            connect_timeout=target_config.connect_timeout,
            reinit_on_error=self._config.reinit_on_error,
            power_on_settle_delay=power_on_settle_delay,
            queue_size=target_config.command_queue_size,
            sleep=self._sleep,
        )

    def create_bridge(self, bridge: BridgeTargetConfig) -> BridgeTargetHandler:
        transport = HelperProcessTransport(
            host=bridge.host,
            port=bridge.port,
            process_name=bridge.helper_process_name,
            helper_path=bridge.helper_path,
            process_manager=self._processes,
            io_timeout=bridge.send_timeout,
            start_helper=bridge.start_helper,
            is_remote=bridge.is_remote_machine,
            start_delay=bridge.helper_start_delay,
            sleep=self._sleep,
        )
        supervisor = self._supervisor(
            TargetId.BRIDGE, bridge, transport, power_on_settle_delay=bridge.power_on_settle_delay
        )
        return BridgeTargetHandler(self._config, bridge, supervisor)

    def create_serial(self, serial: SerialTargetConfig) -> SerialTargetHandler:
        transport = SerialTransport(serial.port, serial.baudrate, io_timeout=serial.send_timeout)
        supervisor = self._supervisor(TargetId.SERIAL, serial, transport)
        toggler = None
        if serial.device_toggler_path is not None:
            toggler = DeviceToggler(
                serial.device_toggler_path,
                self._processes,
                settle_delay=serial.port_settle_delay,
                sleep=self._sleep,
            )
        return SerialTargetHandler(self._config, serial, supervisor, device_toggler=toggler)

    def create(self, target: TargetId) -> TargetHandler:
        """Create the handler for ``target``, enabled or not."""
        if target is TargetId.BRIDGE:
            return self.create_bridge(self._config.bridge)
        return self.create_serial(self._config.serial)

    def create_enabled(self) -> list[TargetHandler]:
        """Create handlers for every enabled target."""
        handlers = []
        for target in TargetId:
            if self._config.target_config(target).enabled:
                handlers.append(self.create(target))
            else:
                logger.debug(f"Target {target.value} disabled, skipped")
        return handlers

    def describe(self, target: TargetId) -> TargetInfo:
        """Capabilities of ``target`` without creating its handler."""
        if target is TargetId.BRIDGE:
            return BridgeTargetHandler.describe(self._config.bridge)
        return SerialTargetHandler.describe(self._config.serial)

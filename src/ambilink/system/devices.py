"""Disable and re-enable USB serial devices through a helper executable.

Some USB-serial controllers do not come back after the host resumes from
standby. Cycling the device (disable, wait, enable, wait) makes the port
usable again. The actual toggling is done by an external tool that accepts
``/disable_by_drive <port>`` and ``/enable_by_drive <port>``.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ambilink.exceptions import AmbilinkError, ExecutableNotFoundError

from .process import ProcessManager

logger = logging.getLogger(__name__)


class DeviceToggler:
    """Cycles a USB device identified by its port name."""

    def __init__(
        self,
        executable: Path | None,
        process_manager: ProcessManager,
        settle_delay: float = 1.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize device toggler.

        Args:
            executable: Tool used to disable/enable devices
            process_manager: Used to run the tool
            settle_delay: Wait after each toggle so the OS releases the port (seconds)
            sleep: Sleep function (injectable for tests)
        """
        self._executable = executable
        self._processes = process_manager
        self._settle_delay = settle_delay
        self._sleep = sleep

    def _run(self, switch: str, port: str) -> None:
        if self._executable is None:
            raise ExecutableNotFoundError(None, "device toggling")
        self._processes.start_process(self._executable, [switch, port], wait_for_exit=True)

    def disable_device_by_port(self, port: str) -> None:
        """Disable the USB device behind ``port``."""
        logger.debug(f"Disconnecting {port}")
        self._run("/disable_by_drive", port)

    def enable_device_by_port(self, port: str) -> None:
        """Enable the USB device behind ``port``."""
        logger.debug(f"Connecting {port}")
        self._run("/enable_by_drive", port)

    def reconnect_port(self, port: str) -> bool:
        """
        Disable and re-enable the device behind ``port``.

        Returns:
            True if both steps ran, False if the tool is missing or failed
        """
        try:
            self.disable_device_by_port(port)
            self._sleep(self._settle_delay)
            self.enable_device_by_port(port)
            self._sleep(self._settle_delay)
        except AmbilinkError as e:
            logger.error(f"Reconnecting {port} failed: {e.technical_message}")
            return False
        return True

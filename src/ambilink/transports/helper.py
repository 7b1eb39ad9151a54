"""TCP transport to a helper process that may have to be launched first."""

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ambilink.exceptions import ExecutableNotFoundError, HelperNotRunningError
from ambilink.system.process import ProcessManager

from .tcp import TcpTransport

logger = logging.getLogger(__name__)


class HelperProcessTransport(TcpTransport):
    """
    Talks to a local helper over TCP, starting the helper when needed.

    Before each connect sequence the transport checks whether the helper is
    running. If not, and auto-start is allowed, it launches the helper and
    waits ``start_delay`` seconds for it to open its port. A helper on a
    remote machine is never checked or started.
    """

    def __init__(
        self,
        host: str,
        port: int,
        process_name: str,
        helper_path: Path | None,
        process_manager: ProcessManager,
        io_timeout: float = 5.0,
        start_helper: bool = True,
        is_remote: bool = False,
        start_delay: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(host, port, io_timeout=io_timeout)
        self._process_name = process_name
        self._helper_path = helper_path
        self._processes = process_manager
        self._start_helper = start_helper
        self._is_remote = is_remote
        self._start_delay = start_delay
        self._sleep = sleep

    def prepare(self) -> None:
        if self._is_remote:
            return

        if self._processes.is_process_running(self._process_name):
            logger.debug(f"{self._process_name} is already running")
            return

        if not self._start_helper:
            raise HelperNotRunningError(self._process_name)

        if self._helper_path is None:
            raise ExecutableNotFoundError(None, self._process_name)

        logger.debug(f"Trying to start {self._helper_path}")
        self._processes.start_process(self._helper_path)
        logger.info(f"{self._process_name} started, waiting {self._start_delay}s")
        self._sleep(self._start_delay)

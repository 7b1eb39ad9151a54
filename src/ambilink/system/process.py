"""Helper process queries and launching."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

import psutil

from ambilink.exceptions import ExecutableNotFoundError, ProcessStartError

logger = logging.getLogger(__name__)


class ProcessManager:
    """Looks up running processes and starts helper executables."""

    def is_process_running(self, name: str) -> bool:
        """
        Check whether a process with the given executable name is running.

        The comparison is case-insensitive ("AtmoHue.exe" matches "atmohue.exe").
        """
        wanted = name.casefold()
        for proc in psutil.process_iter(["name"]):
            proc_name = proc.info.get("name")
            if proc_name and proc_name.casefold() == wanted:
                return True
        return False

    def start_process(
        self,
        path: Path,
        args: Sequence[str] = (),
        wait_for_exit: bool = False,
        timeout: float = 10.0,
    ) -> subprocess.Popen:
        """
        Launch an executable with its own directory as working directory.

        Args:
            path: Executable to run
            args: Command line arguments
            wait_for_exit: Block until the process exits (at most ``timeout``)
            timeout: Seconds to wait when ``wait_for_exit`` is set

        Returns:
            The started process

        Raises:
            ExecutableNotFoundError: If ``path`` does not exist
            ProcessStartError: If the OS refuses to start it
        """
        path = Path(path)
        if not path.is_file():
            raise ExecutableNotFoundError(path, path.name)

        try:
            proc = subprocess.Popen([str(path), *args], cwd=str(path.parent))
        except OSError as e:
            raise ProcessStartError(str(path), str(e)) from e

        logger.debug(f"Started {path.name} {' '.join(args)} (pid {proc.pid})")

        if wait_for_exit:
            try:
                proc.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning(f"{path.name} still running after {timeout}s, not waiting any longer")

        return proc

"""Process-layer exceptions.

- ProcessError: Base class for helper process errors
- ProcessStartError: A helper process could not be launched
- HelperNotRunningError: A required helper is not running and may not be started
"""

from .base import AmbilinkError


class ProcessError(AmbilinkError):
    """Helper process operation failed."""
    pass


class ProcessStartError(ProcessError):
    """Launching a helper process failed."""

    def __init__(self, program: str, original_error: str | None = None):
        """
        Initialize process start error.

        Args:
            program: Path of the program that failed to start
            original_error: Error reported by the OS
        """
        tech_msg = f"Starting {program} failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=f"Could not start {program}",
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Check that the program is installed and executable",
        )
        self.program = program


class HelperNotRunningError(ProcessError):
    """Required helper process is not running and auto-start is disabled."""

    def __init__(self, process_name: str):
        """
        Initialize helper-not-running error.

        Args:
            process_name: Executable name that was looked up
        """
        super().__init__(
            user_message=f"{process_name} is not running",
            recoverable=True,
            recovery_hint=f"Start {process_name} manually or enable 'start_helper' in your configuration",
        )
        self.process_name = process_name

"""Transport-level exceptions.

- TransportError: Base class for connection errors
- ConnectError: Opening a connection to a target failed
- SendError: Writing to an open connection failed
"""

from .base import AmbilinkError


class TransportError(AmbilinkError):
    """Communication with a lighting target failed."""

    def __init__(self, user_message: str, endpoint: str | None = None, **kwargs):
        """
        Initialize transport error.

        Args:
            user_message: User-friendly error message
            endpoint: Address, port or device the error refers to
        """
        kwargs.setdefault("recoverable", True)
        super().__init__(user_message, **kwargs)
        self.endpoint = endpoint


class ConnectError(TransportError):
    """Connecting to a target failed (refused, timed out, port busy)."""

    def __init__(self, endpoint: str, original_error: str | None = None):
        """
        Initialize connect error.

        Args:
            endpoint: Address or port that was being connected
            original_error: Error reported by the socket or serial layer
        """
        tech_msg = f"Connect to {endpoint} failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=f"Could not connect to {endpoint}",
            endpoint=endpoint,
            technical_message=tech_msg,
            recovery_hint="Check that the target is powered on and reachable",
        )


class SendError(TransportError):
    """Writing a command to a connected target failed."""

    def __init__(self, endpoint: str, original_error: str | None = None):
        """
        Initialize send error.

        Args:
            endpoint: Address or port the command was sent to
            original_error: Error reported by the socket or serial layer
        """
        tech_msg = f"Send to {endpoint} failed"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=f"Lost connection to {endpoint}",
            endpoint=endpoint,
            technical_message=tech_msg,
        )

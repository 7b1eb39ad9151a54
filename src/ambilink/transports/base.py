"""Transport abstractions shared by every target."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Connection(ABC):
    """
    One open point-to-point channel to a target.

    A connection is never reopened: the supervisor asks its transport for a
    fresh one on every attempt and drops the old handle.
    """

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Human-readable address of the peer (for logging)."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """False once the connection was closed or a write failed."""
        pass

    @abstractmethod
    def send(self, payload: bytes) -> None:
        """
        Write a command to the target.

        Raises:
            SendError: If the write fails or times out
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the handle. Idempotent, never raises."""
        pass


class Transport(ABC):
    """
    Factory for connections to one target.

    Subclasses implement ``connect``; ``prepare`` is an optional hook that
    runs once before each connect sequence.
    """

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Human-readable address of the target (for logging)."""
        pass

    def prepare(self) -> None:
        """
        Make the target reachable before the first connect attempt.

        Raises:
            ConfigurationError: If the target cannot be prepared because of
                missing configuration. Not retried.
            ProcessError: If a required helper process cannot be started.
        """
        return None

    @abstractmethod
    def connect(self, timeout: float) -> Connection:
        """
        Open a new connection.

        Args:
            timeout: Seconds to wait for the peer

        Raises:
            ConnectError: If the connection cannot be established
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.endpoint})"

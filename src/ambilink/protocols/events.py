"""Domain events for the observer pattern."""

from enum import Enum


class TargetEvent(Enum):
    """Connection lifecycle events reported by target handlers."""

    CONNECTED = "connected"              # Connect sequence finished with an open connection
    CONNECTION_LOST = "connection_lost"  # Retry budget exhausted, target stays idle

"""Observer protocol definitions."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .events import TargetEvent

if TYPE_CHECKING:
    from ambilink.models import TargetId


@runtime_checkable
class TargetObserver(Protocol):
    """
    Observer that receives target connection events.

    The orchestrator implements this to learn when a target gave up
    reconnecting.
    """

    def on_target_event(self, event: TargetEvent, target: "TargetId") -> None:
        """
        Handle a target connection event.

        Args:
            event: The type of event
            target: Target that produced the event

        Note:
            Called from the target's connect thread; implementations must be
            thread-safe and must not block.
        """
        ...

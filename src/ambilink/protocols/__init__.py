"""Events and observer protocols."""

from .events import TargetEvent
from .observers import TargetObserver

__all__ = ["TargetEvent", "TargetObserver"]

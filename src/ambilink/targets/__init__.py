"""Lighting target handlers."""

from .base import TargetHandler
from .bridge import BridgeTargetHandler
from .registry import TargetRegistry
from .serial_controller import SerialTargetHandler

__all__ = ["BridgeTargetHandler", "SerialTargetHandler", "TargetHandler", "TargetRegistry"]

"""Ambilink: ambient lighting from captured screen colors."""

__version__ = "0.1.0"

from .core import ColorPipeline, ConnectionSupervisor
from .orchestration import Orchestrator
from .targets import BridgeTargetHandler, SerialTargetHandler, TargetHandler

__all__ = [
    "BridgeTargetHandler",
    "ColorPipeline",
    "ConnectionSupervisor",
    "Orchestrator",
    "SerialTargetHandler",
    "TargetHandler",
]

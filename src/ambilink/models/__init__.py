"""Data models for ambilink."""

from .color import PRIORITY_CAPTURE, PRIORITY_OFF, PRIORITY_STATIC, Color, ColorCommand
from .config import AppConfig, BridgeTargetConfig, SerialTargetConfig, TargetConfig
from .enums import (
    FRAME_DRIVEN_EFFECTS,
    ColorStrategy,
    CommandType,
    ConnectionPhase,
    ContentEffect,
    PowerMode,
    TargetId,
    TransportKind,
)
from .frame import FrameBuffer
from .target import TargetInfo

__all__ = [
    # Config
    "AppConfig",
    "BridgeTargetConfig",
    "SerialTargetConfig",
    "TargetConfig",
    # Models
    "Color",
    "ColorCommand",
    "FrameBuffer",
    "TargetInfo",
    "PRIORITY_CAPTURE",
    "PRIORITY_OFF",
    "PRIORITY_STATIC",
    # Enums
    "ColorStrategy",
    "CommandType",
    "ConnectionPhase",
    "ContentEffect",
    "FRAME_DRIVEN_EFFECTS",
    "PowerMode",
    "TargetId",
    "TransportKind",
]

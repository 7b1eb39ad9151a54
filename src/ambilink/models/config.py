"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from ambilink.utils.persistence import PydanticPersistence

from .color import Color
from .enums import ContentEffect, TargetId

DEFAULT_CONFIG_DIR = Path.home() / ".ambilink"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"


class TargetConfig(BaseModel):
    """Settings shared by every target."""

    enabled: bool = Field(default=False, description="Drive this target")

    # Connection supervision
    reconnect_attempts: int = Field(
        default=5, ge=0, description="Connect retries after the first attempt"
    )
    reconnect_delay: float = Field(
        default=2.0, ge=0, description="Pause between connect attempts (seconds)"
    )
    connect_timeout: float = Field(default=5.0, gt=0, description="Connect timeout (seconds)")
    send_timeout: float = Field(default=5.0, gt=0, description="Send/receive timeout (seconds)")
    command_queue_size: int = Field(
        default=64, ge=1, description="Pending commands kept before new ones are dropped"
    )

    # Color pipeline
    min_color_difference: int = Field(
        default=0,
        ge=0,
        le=255,
        description="Skip colors closer than this to the last sent one (0 = send all)",
    )
    min_diversion: int = Field(
        default=15,
        ge=0,
        le=255,
        description="Pixels whose channels differ by no more than this are ignored when averaging",
    )

    # Power handling
    enable_on_resume: bool = Field(default=False, description="Power target on after resume")
    disable_on_suspend: bool = Field(default=False, description="Power target off on suspend")


class BridgeTargetConfig(TargetConfig):
    """Network light bridge reached through its helper process."""

    host: str = Field(default="127.0.0.1", description="Helper host")
    port: int = Field(default=20123, ge=1, le=65535, description="Helper TCP port")
    is_remote_machine: bool = Field(
        default=False, description="Helper runs on another machine (never started locally)"
    )
    start_helper: bool = Field(default=True, description="Launch the helper if it is not running")
    helper_path: Path | None = Field(default=None, description="Path to the helper executable")
    helper_process_name: str = Field(
        default="atmohue.exe", description="Process name used to detect a running helper"
    )
    helper_start_delay: float = Field(
        default=5.0, ge=0, description="Wait after launching the helper (seconds)"
    )
    power_on_settle_delay: float = Field(
        default=2.0, ge=0, description="Wait after powering the bridge on (seconds)"
    )

    @field_serializer("helper_path")
    def serialize_path(self, path: Path | None) -> str | None:
        return str(path) if path is not None else None

    @property
    def settings_path(self) -> Path | None:
        """Helper settings file, stored next to the helper executable."""
        if self.helper_path is None:
            return None
        return self.helper_path.parent / "settings.xml"


class SerialTargetConfig(TargetConfig):
    """LED controller attached to a serial/COM port."""

    port: str = Field(default="COM3", description="Serial port name")
    baudrate: int = Field(default=115200, gt=0, description="Serial baud rate")
    reconnect_port_on_resume: bool = Field(
        default=False, description="Disable and re-enable the USB device on resume"
    )
    device_toggler_path: Path | None = Field(
        default=None, description="Executable used to disable/enable the USB device"
    )
    port_settle_delay: float = Field(
        default=1.5, ge=0, description="Wait after disabling/enabling the port (seconds)"
    )

    @field_serializer("device_toggler_path")
    def serialize_path(self, path: Path | None) -> str | None:
        return str(path) if path is not None else None


class AppConfig(BaseModel):
    """Application configuration and settings."""

    reinit_on_error: bool = Field(
        default=True, description="Reconnect automatically when a send fails"
    )
    current_effect: ContentEffect = Field(
        default=ContentEffect.LIVE_MODE, description="Effect applied on startup"
    )
    static_color: Color = Field(
        default_factory=lambda: Color(r=255, g=255, b=255),
        description="Color sent by the static color effect",
    )

    bridge: BridgeTargetConfig = Field(default_factory=BridgeTargetConfig)
    serial: SerialTargetConfig = Field(default_factory=SerialTargetConfig)

    def target_config(self, target: TargetId) -> TargetConfig:
        """Settings of ``target``."""
        if target is TargetId.BRIDGE:
            return self.bridge
        return self.serial

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.ambilink/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or DEFAULT_CONFIG_PATH, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)

"""Enumerations shared across targets, pipeline and supervisor."""

from enum import Enum


class TargetId(str, Enum):
    """Configured lighting targets."""

    BRIDGE = "bridge"  # Network light bridge reached through its helper process
    SERIAL = "serial"  # LED controller on a COM/serial port


class TransportKind(str, Enum):
    """How a target is reached."""

    NETWORK = "network"
    SERIAL = "serial"
    LOCAL_PROCESS = "local_process"


class ContentEffect(str, Enum):
    """Visual modes that decide what drives a target."""

    GIF_READER = "gif_reader"
    LEDS_DISABLED = "leds_disabled"
    LIVE_MODE = "live_mode"
    STATIC_COLOR = "static_color"
    VU_METER = "vu_meter"
    VU_METER_RAINBOW = "vu_meter_rainbow"
    UNDEFINED = "undefined"

    @property
    def is_frame_driven(self) -> bool:
        """True if colors for this effect come from captured frames."""
        return self in FRAME_DRIVEN_EFFECTS

    @property
    def uses_edge_sampling(self) -> bool:
        """True if frames for this effect are read at the left/right edges."""
        return self in (ContentEffect.VU_METER, ContentEffect.VU_METER_RAINBOW)


FRAME_DRIVEN_EFFECTS = frozenset({
    ContentEffect.GIF_READER,
    ContentEffect.LIVE_MODE,
    ContentEffect.VU_METER,
    ContentEffect.VU_METER_RAINBOW,
})


class ConnectionPhase(str, Enum):
    """Connection supervisor state."""

    IDLE = "idle"              # Not connected, no attempt running
    CONNECTING = "connecting"  # Connect sequence in flight (init-lock held)
    CONNECTED = "connected"    # Connection open


class PowerMode(str, Enum):
    """Host power-state transitions."""

    RESUME = "resume"
    SUSPEND = "suspend"


class CommandType(str, Enum):
    """Command families of the bridge line protocol."""

    COLOR = "Color"
    GROUP = "Group"
    POWER = "Power"
    ROOM = "Room"


class ColorStrategy(str, Enum):
    """Frame-to-color extraction strategies, each with its own color memory."""

    LIVE = "live"  # Full-frame average
    VU = "vu"      # Edge-sampled

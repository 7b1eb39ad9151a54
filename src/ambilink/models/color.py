"""Color models for lighting commands."""

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """Standard 8-bit RGB color.

    Frozen so it can be compared and stored as hysteresis memory.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def off(cls) -> "Color":
        """Create off (black) color."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def from_tuple(cls, rgb: tuple[int, int, int]) -> "Color":
        """Create a color from an (r, g, b) tuple."""
        r, g, b = rgb
        return cls(r=int(r), g=int(g), b=int(b))

    @property
    def is_black(self) -> bool:
        return self.r == 0 and self.g == 0 and self.b == 0

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def max_channel_delta(self, other: "Color") -> int:
        """Largest absolute per-channel difference to ``other``."""
        return max(abs(self.r - other.r), abs(self.g - other.g), abs(self.b - other.b))

    def to_hex(self) -> str:
        """Convert to hex color string (e.g., '#FF0000')."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


# Fixed precedence values understood by the bridge helper
PRIORITY_OFF = 1
PRIORITY_STATIC = 10
PRIORITY_CAPTURE = 200


class ColorCommand(BaseModel):
    """A color plus the precedence and brightness it is sent with."""

    model_config = ConfigDict(frozen=True)

    color: Color
    priority: int = Field(default=PRIORITY_CAPTURE, ge=0)
    brightness: int = Field(default=0, ge=0, le=255)

    @classmethod
    def off(cls) -> "ColorCommand":
        """Command that turns the lights off."""
        return cls(color=Color.off(), priority=PRIORITY_OFF, brightness=0)

    def as_fields(self) -> tuple[int, int, int, int, int]:
        """(r, g, b, priority, brightness)."""
        return (*self.color.to_rgb_tuple(), self.priority, self.brightness)

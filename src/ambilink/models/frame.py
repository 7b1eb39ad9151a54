"""Raw captured frame handed to targets."""

from dataclasses import dataclass, replace

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True)
class FrameBuffer:
    """
    Raw pixel rows as delivered by the capture source.

    Pixels are stored B, G, R (and an unused fourth byte for 32-bit frames),
    rows are ``stride`` bytes apart. The buffer is owned by the caller; the
    pipeline only reads it for the duration of one call.
    """

    data: bytes | bytearray | memoryview
    width: int
    height: int
    stride: int
    bytes_per_pixel: int = 4

    def __post_init__(self) -> None:
        if self.bytes_per_pixel not in (3, 4):
            raise ValueError(f"bytes_per_pixel must be 3 or 4, got {self.bytes_per_pixel}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid frame size {self.width}x{self.height}")
        if self.stride < self.width * self.bytes_per_pixel:
            raise ValueError(
                f"Stride {self.stride} too small for width {self.width} "
                f"at {self.bytes_per_pixel} bytes per pixel"
            )
        if len(self.data) < self.stride * self.height:
            raise ValueError(
                f"Buffer holds {len(self.data)} bytes, expected {self.stride * self.height}"
            )

    def to_rgb_array(self) -> npt.NDArray[np.int32]:
        """
        View the frame as a (height, width, 3) array in R, G, B order.

        Row padding and the fourth byte of 32-bit pixels are dropped. The
        result is a fresh array, so no reference to ``data`` survives.
        """
        raw = np.frombuffer(self.data, dtype=np.uint8, count=self.stride * self.height)
        rows = raw.reshape(self.height, self.stride)[:, : self.width * self.bytes_per_pixel]
        pixels = rows.reshape(self.height, self.width, self.bytes_per_pixel)
        # BGR(X) -> RGB
        return pixels[:, :, 2::-1].astype(np.int32)

    def detached(self) -> "FrameBuffer":
        """Copy of this frame that owns its pixel data."""
        return replace(self, data=bytes(self.data))

    @classmethod
    def from_rgb_array(cls, rgb: npt.ArrayLike, bytes_per_pixel: int = 4) -> "FrameBuffer":
        """Build a tightly packed BGR(X) frame from an (h, w, 3) RGB array."""
        arr = np.asarray(rgb, dtype=np.uint8)
        height, width = arr.shape[:2]
        packed = np.zeros((height, width, bytes_per_pixel), dtype=np.uint8)
        packed[:, :, :3] = arr[:, :, ::-1]
        return cls(
            data=packed.tobytes(),
            width=width,
            height=height,
            stride=width * bytes_per_pixel,
            bytes_per_pixel=bytes_per_pixel,
        )

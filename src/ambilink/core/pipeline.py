"""Frame-to-color pipeline.

Turns one captured frame into at most one color command:

- Full-frame average (live/GIF effects): near-gray pixels, whose channels
  all lie within ``min_diversion`` of each other, are ignored; the rest are
  averaged with integer truncation. A frame with no colored pixel yields
  nothing.
- Edge sampling (VU meter effects): rows are scanned top to bottom, left
  edge before right edge; the first non-black pixel wins, black if none.

Hysteresis then drops colors that differ from the last color sent for the
same strategy by no more than ``min_color_difference`` on every channel.
"""

import logging
from threading import Lock

import numpy as np
import numpy.typing as npt

from ambilink.models import PRIORITY_CAPTURE, Color, ColorCommand, ColorStrategy, ContentEffect, FrameBuffer

logger = logging.getLogger(__name__)


def average_color(rgb: npt.NDArray[np.int32], min_diversion: int) -> Color | None:
    """
    Average the colored pixels of an (h, w, 3) RGB array.

    Args:
        rgb: Pixel array in R, G, B order
        min_diversion: Pixels whose pairwise channel differences are all
            within this value are dropped

    Returns:
        Truncated mean of the kept pixels, or None if every pixel was dropped
    """
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    kept = (
        (np.abs(r - g) > min_diversion)
        | (np.abs(r - b) > min_diversion)
        | (np.abs(g - b) > min_diversion)
    )

    count = int(np.count_nonzero(kept))
    if count == 0:
        return None

    totals = rgb[kept].sum(axis=0, dtype=np.int64)
    return Color.from_tuple(tuple(int(total) // count for total in totals))


def edge_color(rgb: npt.NDArray[np.int32]) -> Color:
    """
    First non-black pixel on the left or right edge, scanning rows top-down.

    Within a row the left edge is checked before the right edge.
    """
    left = rgb[:, 0, :]
    right = rgb[:, -1, :]
    left_hit = left.any(axis=1)
    right_hit = right.any(axis=1)
    rows = left_hit | right_hit

    if not rows.any():
        return Color.off()

    row = int(np.argmax(rows))
    pixel = left[row] if left_hit[row] else right[row]
    return Color.from_tuple(tuple(pixel))


def strategy_for(effect: ContentEffect) -> ColorStrategy:
    """Memory cell and sampler used for frames under ``effect``."""
    return ColorStrategy.VU if effect.uses_edge_sampling else ColorStrategy.LIVE


class ColorPipeline:
    """
    Per-target color extraction with hysteresis memory.

    Each target owns one pipeline. The live and VU strategies keep separate
    memory cells, and memory survives effect switches.
    """

    def __init__(self, min_diversion: int = 15, min_color_difference: int = 0):
        """
        Initialize pipeline.

        Args:
            min_diversion: Gray-pixel cutoff for the full-frame average
            min_color_difference: Hysteresis threshold (0 disables suppression)
        """
        self._min_diversion = min_diversion
        self._min_color_difference = min_color_difference
        self._memory: dict[ColorStrategy, Color] = {
            ColorStrategy.LIVE: Color.off(),
            ColorStrategy.VU: Color.off(),
        }
        self._lock = Lock()

    @property
    def min_color_difference(self) -> int:
        return self._min_color_difference

    def memory(self, strategy: ColorStrategy) -> Color:
        """Last color sent for ``strategy``."""
        with self._lock:
            return self._memory[strategy]

    def extract(self, frame: FrameBuffer, strategy: ColorStrategy) -> Color | None:
        """Compute the candidate color for a frame, without hysteresis."""
        rgb = frame.to_rgb_array()
        if strategy is ColorStrategy.VU:
            return edge_color(rgb)
        return average_color(rgb, self._min_diversion)

    def accept(self, strategy: ColorStrategy, color: Color) -> bool:
        """
        Apply hysteresis to a candidate color.

        Memory is not touched; call :meth:`commit` once the color went out.

        Returns:
            True if the color should be sent
        """
        with self._lock:
            previous = self._memory[strategy]
        if not self._min_color_difference:
            return True
        return previous.max_channel_delta(color) > self._min_color_difference

    def commit(self, strategy: ColorStrategy, color: Color) -> None:
        """Record ``color`` as the last color sent for ``strategy``."""
        with self._lock:
            self._memory[strategy] = color

    def process(self, frame: FrameBuffer, effect: ContentEffect) -> ColorCommand | None:
        """
        Turn a frame into a color command for the given effect.

        The caller commits the color to memory once the command is sent.

        Returns:
            The command to send, or None if the frame has no usable color or
            the color is too close to the last one sent
        """
        strategy = strategy_for(effect)

        color = self.extract(frame, strategy)
        if color is None:
            logger.debug("Frame has no colored pixels, skipped")
            return None

        if not self.accept(strategy, color):
            return None

        return ColorCommand(color=color, priority=PRIORITY_CAPTURE, brightness=0)

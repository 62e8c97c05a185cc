"""Hue rotation for the nightlight animation."""

import colorsys
from typing import Tuple

from config import DEFAULT_HUE_STEP, DEFAULT_START_HUE


def hue_to_rgb(hue_deg: float) -> Tuple[int, int, int]:
    """Convert a hue in degrees to a fully saturated 8-bit RGB triple.

    Channels are truncated, not rounded, from [0, 1] to [0, 255].
    """
    r, g, b = colorsys.hsv_to_rgb((hue_deg % 360.0) / 360.0, 1.0, 1.0)
    return int(r * 255), int(g * 255), int(b * 255)


class HueCycle:
    """Hue cursor advanced once per animation tick."""

    def __init__(self, start_hue: float = DEFAULT_START_HUE, step: float = DEFAULT_HUE_STEP):
        self._hue = start_hue % 360.0
        self.step = step

    @property
    def hue(self) -> float:
        return self._hue

    def tick(self) -> Tuple[int, int, int]:
        """Advance the cursor one step (wrapping at 360) and return its color."""
        self._hue = (self._hue + self.step) % 360.0
        return hue_to_rgb(self._hue)

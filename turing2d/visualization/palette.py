"""
Symbol palette.

Symbol 0 is the black background. Symbol i > 0 gets hue
(i * golden_ratio_conjugate) mod 1 at fixed saturation and lightness,
so neighbouring symbol indices land far apart on the color wheel.
"""

from __future__ import annotations
from typing import Tuple
import colorsys
import math

import numpy as np

GOLDEN_RATIO_CONJUGATE = 0.618033988749895
SATURATION = 0.9
LIGHTNESS = 0.667

BACKGROUND = (0, 0, 0)
HEAD_COLOR = (255, 255, 255)


def _to_byte(channel: float) -> int:
    return math.floor(channel * 255 + 0.5)


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """HSL in [0, 1] to 8-bit RGB, rounding half up."""
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return (_to_byte(r), _to_byte(g), _to_byte(b))


def generate_palette(num_symbols: int) -> np.ndarray:
    """
    Palette indexed by symbol.

    Returns:
        uint8 array of shape (num_symbols, 3)
    """
    colors = [BACKGROUND]
    for i in range(1, num_symbols):
        hue = (i * GOLDEN_RATIO_CONJUGATE) % 1
        colors.append(hsl_to_rgb(hue, SATURATION, LIGHTNESS))
    return np.array(colors, dtype=np.uint8).reshape(-1, 3)

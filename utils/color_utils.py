"""
Color math used for busyness scoring and text contrast
"""

import math
from typing import Sequence

# 0.05 on a 0-255 scale
CONTRAST_OFFSET = 0.05 * 255

# Luminance weights in thousandths, for exact integer sums
LUMA_WEIGHTS_MILLI = (299, 587, 114)


def luminance(r, g, b):
    """
    Perceived brightness of an RGB color (0-255 scale)

    Works on plain numbers and on numpy arrays of channels alike.

    Args:
        r: Red channel
        g: Green channel
        b: Blue channel

    Returns:
        Weighted luminance
    """
    return 0.299 * r + 0.587 * g + 0.114 * b


def contrast_ratio(color1: Sequence[float], color2: Sequence[float]) -> float:
    """
    WCAG-style contrast ratio between two colors

    Uses raw (non-linearized) luminance, so values differ from the W3C
    definition. The result is always >= 1 and symmetric in its arguments.

    Args:
        color1: First color (r, g, b)
        color2: Second color (r, g, b)

    Returns:
        Contrast ratio, 1.0 for identical colors
    """
    lum1 = luminance(color1[0], color1[1], color1[2])
    lum2 = luminance(color2[0], color2[1], color2[2])

    lighter = max(lum1, lum2)
    darker = min(lum1, lum2)

    return (lighter + CONTRAST_OFFSET) / (darker + CONTRAST_OFFSET)


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves going up (Python's round() goes to even)"""
    return int(math.floor(value + 0.5))

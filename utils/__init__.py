"""
Utility Functions
"""

from .color_utils import (
    luminance,
    contrast_ratio,
    round_half_up,
)
from .exceptions import (
    PlacementError,
    InvalidInputError,
    NoCandidateShapesError,
    NoCandidateRectangleError,
)

__all__ = [
    "luminance",
    "contrast_ratio",
    "round_half_up",
    "PlacementError",
    "InvalidInputError",
    "NoCandidateShapesError",
    "NoCandidateRectangleError",
]

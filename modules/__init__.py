"""
Text Placement Analyzer Modules
"""

from .models import (
    PixelBuffer,
    GridConfig,
    GridStats,
    AnalysisResult,
    AnalysisOutcome,
    TextColor,
)
from .grid_stats import compute_grid_stats
from .shapes import generate_shapes
from .search import find_best_rect
from .palette import TextColorSelector
from .surface import FontSpec, PillowSurface
from .layout import LayoutEngine
from .renderer import Renderer
from .analyzer import ImageAnalyzer

__all__ = [
    "PixelBuffer",
    "GridConfig",
    "GridStats",
    "AnalysisResult",
    "AnalysisOutcome",
    "TextColor",
    "compute_grid_stats",
    "generate_shapes",
    "find_best_rect",
    "TextColorSelector",
    "FontSpec",
    "PillowSurface",
    "LayoutEngine",
    "Renderer",
    "ImageAnalyzer",
]

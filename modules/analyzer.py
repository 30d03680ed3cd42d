"""
Image Analyzer - Run the full placement pipeline on one pixel buffer
"""

from typing import Callable, Optional

from loguru import logger

from config import settings
from modules.grid_stats import compute_grid_stats
from modules.models import (
    AnalysisOutcome,
    AnalysisResult,
    CellSpan,
    GridConfig,
    PixelBuffer,
    Rect,
)
from modules.palette import TextColorSelector
from modules.search import find_best_rect
from modules.shapes import generate_shapes
from utils.exceptions import (
    NoCandidateRectangleError,
    NoCandidateShapesError,
    PlacementError,
)


class ImageAnalyzer:
    """
    Finds the calmest region of an image for text and picks a legible color

    Each call is a pure function of its arguments; nothing is kept between
    calls. Data conditions that prevent a placement (empty image, no shape
    fits) are reported through the notifier and produce an empty result.
    """

    def __init__(self, notifier: Optional[Callable[[str], None]] = None):
        """
        Initialize Image Analyzer

        Args:
            notifier: Receives warning messages (default: log them)
        """
        self.notifier = notifier
        logger.info("ImageAnalyzer initialized")

    def _notify(self, message: str) -> None:
        logger.warning(message)
        if self.notifier is not None:
            self.notifier(message)

    def analyze(
        self,
        pixels: PixelBuffer,
        grid_config: GridConfig = None,
        target_area: int = None,
        prefer_cell_color: bool = None,
        border_exclusion: int = None
    ) -> AnalysisOutcome:
        """
        Analyze an image for text placement

        Args:
            pixels: Image to analyze
            grid_config: Grid partition (default: from settings)
            target_area: Desired rectangle size in cells (default: from settings)
            prefer_cell_color: Try a cell color before black/white (default: from settings)
            border_exclusion: Cells kept free along every edge (default: from settings)

        Returns:
            AnalysisOutcome; ``result`` is None when no placement was found
        """
        if not isinstance(pixels, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(pixels).__name__}")

        grid_config = grid_config or GridConfig(settings.GRID_ROWS, settings.GRID_COLS)
        target_area = settings.TARGET_AREA if target_area is None else target_area
        prefer_cell_color = settings.PREFER_CELL_COLOR if prefer_cell_color is None else prefer_cell_color
        border_exclusion = settings.BORDER_EXCLUSION_CELLS if border_exclusion is None else border_exclusion

        if target_area < 1:
            raise ValueError(f"Target area must be at least 1 cell, got {target_area}")
        if border_exclusion < 0:
            raise ValueError(f"Border exclusion must not be negative, got {border_exclusion}")

        logger.info(
            f"Analyzing {pixels.width}x{pixels.height} image "
            f"(grid {grid_config.rows}x{grid_config.cols}, area {target_area}, "
            f"border {border_exclusion})"
        )

        grid = None
        try:
            grid = compute_grid_stats(pixels, grid_config)

            max_rows = grid_config.rows - 2 * border_exclusion
            max_cols = grid_config.cols - 2 * border_exclusion
            shapes = generate_shapes(target_area, max_rows, max_cols)
            if not shapes:
                raise NoCandidateShapesError(target_area, max_rows, max_cols)

            best = find_best_rect(shapes, grid, border_exclusion)
            if best is None:
                raise NoCandidateRectangleError(len(shapes))

        except PlacementError as e:
            self._notify(e.message)
            return AnalysisOutcome(result=None, hover_data=grid)

        selector = TextColorSelector(prefer_cell_color)
        text_color, contrast = selector.select_text_color(best, grid)

        result = AnalysisResult(
            rect=Rect(best.x, best.y, best.width, best.height),
            text_color=text_color,
            font_size=selector.suggest_font_size(best),
            avg_background_color=best.avg_color,
            aspect_ratio_name=best.shape.name,
            actual_cells=CellSpan(best.shape.rows, best.shape.cols),
            rect_busyness=best.avg_busyness,
            text_contrast_ratio=contrast,
        )

        logger.info(
            f"Analysis complete! Best area: {result.aspect_ratio_name} "
            f"{best.shape.rows}x{best.shape.cols} at ({best.r_start}, {best.c_start}), "
            f"busyness={result.rect_busyness:.2f}, contrast={contrast:.2f}:1"
        )

        return AnalysisOutcome(result=result, hover_data=grid)

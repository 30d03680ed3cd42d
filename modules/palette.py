"""
Palette Module - Select a text color and initial font size for a placement
"""

from typing import Sequence, Tuple

from loguru import logger

from modules.models import GridStats, RectCandidate, TextColor
from utils.color_utils import contrast_ratio, luminance

LIGHT_THRESHOLD = 128  # Backgrounds brighter than this get black text
MIN_CELL_COLOR_CONTRAST = 2.5  # A cell color must beat this to be used as text color
MIN_SUGGESTED_FONT_SIZE = 12


class TextColorSelector:
    """
    Chooses a text color with high contrast against a placement's background
    """

    def __init__(self, prefer_cell_color: bool = False):
        """
        Initialize Text Color Selector

        Args:
            prefer_cell_color: Try the most contrasting cell color before black/white
        """
        self.prefer_cell_color = prefer_cell_color
        logger.info(f"TextColorSelector initialized (prefer_cell_color={prefer_cell_color})")

    def get_contrast_color(self, rgb: Sequence[float]) -> TextColor:
        """
        Get high-contrast color (black or white)

        Args:
            rgb: Background RGB color

        Returns:
            Black for light backgrounds, white otherwise
        """
        if luminance(rgb[0], rgb[1], rgb[2]) > LIGHT_THRESHOLD:
            return TextColor.black()
        return TextColor.white()

    def select_text_color(self, rect: RectCandidate, grid: GridStats) -> Tuple[TextColor, float]:
        """
        Select the text color for a placement

        The contrast ratio is measured against the resolved (integer) color,
        not the fractional cell average it came from.

        Args:
            rect: Chosen placement
            grid: Per-cell statistics the placement was found in

        Returns:
            (text color, contrast ratio against the placement background)
        """
        background = rect.avg_color
        text_color = None

        if self.prefer_cell_color:
            best_cell_color = None
            max_contrast = 0.0

            for r in range(rect.r_start, rect.r_start + rect.shape.rows):
                for c in range(rect.c_start, rect.c_start + rect.shape.cols):
                    cell_color = grid.cell(r, c).avg_color
                    contrast = contrast_ratio(cell_color, background)
                    if contrast > max_contrast:
                        max_contrast = contrast
                        best_cell_color = cell_color

            if best_cell_color is not None and max_contrast > MIN_CELL_COLOR_CONTRAST:
                text_color = TextColor.from_rgb(best_cell_color)
                logger.debug(f"Using cell color {text_color} (contrast {max_contrast:.2f})")
            else:
                logger.debug(
                    f"Best cell contrast {max_contrast:.2f} <= {MIN_CELL_COLOR_CONTRAST}, "
                    f"falling back to black/white"
                )

        if text_color is None:
            text_color = self.get_contrast_color(background)

        return text_color, contrast_ratio(text_color.rgb, background)

    def suggest_font_size(self, rect: RectCandidate) -> float:
        """
        Initial font size suggestion for a placement

        The layout engine may shrink it further to fit the text.

        Args:
            rect: Chosen placement

        Returns:
            Font size in pixels (at least 12)
        """
        cell_height = rect.height / rect.shape.rows
        return float(max(
            MIN_SUGGESTED_FONT_SIZE,
            min(cell_height * 0.6, rect.height * 0.3, rect.width * 0.2)
        ))

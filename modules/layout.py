"""
Layout Engine - Wrap, size and align text inside a placement rectangle
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from config import settings
from modules.models import AnalysisResult, Rect, TextColor
from modules.surface import FontSpec, RenderSurface
from utils.color_utils import luminance

DARK_TEXT_THRESHOLD = 128


@dataclass(frozen=True)
class Scrim:
    """Translucent box drawn behind text"""
    color: Tuple[int, int, int]
    opacity: float

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return self.color + (int(round(self.opacity * 255)),)


@dataclass(frozen=True)
class TextLayout:
    """Everything needed to draw text into a placement"""
    rect: Rect
    text_color: TextColor
    lines: Tuple[str, ...]
    font_size: int
    line_height: float
    block_height: float
    h_align: str  # 'left', 'center', 'right'
    v_align: str  # 'top', 'middle', 'bottom'
    x: float  # Anchor x for every line
    y: float  # Top of the text block
    scrim: Optional[Scrim] = None

    def line_positions(self) -> List[Tuple[str, float, float]]:
        """(line, x, y) for each line, top baseline"""
        return [
            (line, self.x, self.y + index * self.line_height)
            for index, line in enumerate(self.lines)
        ]


class LayoutEngine:
    """
    Fits text into an analysis rectangle

    Wraps greedily, shrinks the font until the block fits, aligns the block
    away from the canvas center and decides whether a scrim is needed.
    """

    def __init__(
        self,
        padding: int = None,
        line_height_multiplier: float = None,
        min_font_size: int = None,
        contrast_threshold: float = None,
        busyness_threshold: float = None,
        font_family: str = None
    ):
        """
        Initialize Layout Engine

        Args:
            padding: Inset on all sides of the rectangle
            line_height_multiplier: Line height as a multiple of font size
            min_font_size: Smallest font size tried
            contrast_threshold: Contrast ratio below which a scrim is drawn
            busyness_threshold: Busyness above which a scrim is drawn
            font_family: Font family for measuring and drawing
        """
        self.padding = settings.TEXT_PADDING if padding is None else padding
        self.line_height_multiplier = line_height_multiplier or settings.LINE_HEIGHT_MULTIPLIER
        self.min_font_size = min_font_size or settings.MIN_RENDER_FONT_SIZE
        self.contrast_threshold = (
            settings.CONTRAST_THRESHOLD_FOR_SCRIM if contrast_threshold is None else contrast_threshold
        )
        self.busyness_threshold = (
            settings.BUSYNESS_THRESHOLD_FOR_SCRIM if busyness_threshold is None else busyness_threshold
        )
        self.font_family = font_family or settings.FONT_FAMILY

        logger.info(
            f"LayoutEngine initialized (padding={self.padding}, "
            f"min_font_size={self.min_font_size})"
        )

    def _font(self, size: int) -> FontSpec:
        return FontSpec(size=size, family=self.font_family)

    def needs_scrim(self, result: AnalysisResult) -> bool:
        return (
            result.text_contrast_ratio < self.contrast_threshold
            or result.rect_busyness > self.busyness_threshold
        )

    def select_scrim(self, result: AnalysisResult) -> Optional[Scrim]:
        """
        Scrim for a result, or None if the text is legible without one

        The scrim is the inverse of the text lightness: white under dark
        text, black under light text. Lower contrast gets a denser scrim.
        """
        if not self.needs_scrim(result):
            return None

        text_rgb = result.text_color.rgb
        text_is_dark = luminance(text_rgb.r, text_rgb.g, text_rgb.b) < DARK_TEXT_THRESHOLD
        color = (255, 255, 255) if text_is_dark else (0, 0, 0)

        if result.text_contrast_ratio < 2.5:
            opacity = 0.7
        elif result.text_contrast_ratio < 3.5:
            opacity = 0.6
        else:
            opacity = 0.5

        return Scrim(color=color, opacity=opacity)

    def wrap_text(self, surface: RenderSurface, text: str, max_width: float, font: FontSpec) -> List[str]:
        """
        Wrap text greedily into lines narrower than max_width

        A word that is wider than max_width on its own becomes its own
        (overflowing) line. Words are never dropped.

        Args:
            surface: Surface used to measure text
            text: Input text
            max_width: Maximum line width in pixels
            font: Font to measure with

        Returns:
            List of text lines
        """
        words = text.split()
        if not words or max_width <= 0:
            return []

        lines = []
        current_line = words[0]

        for word in words[1:]:
            test_line = f"{current_line} {word}"
            if surface.measure_text(test_line, font) < max_width:
                current_line = test_line
            else:
                lines.append(current_line)
                current_line = word

        lines.append(current_line)

        return lines

    def fit_text(self, surface: RenderSurface, text: str, result: AnalysisResult) -> Tuple[int, List[str]]:
        """
        Find the largest font size at which the wrapped text fits

        Args:
            surface: Surface used to measure text
            text: Text to fit
            result: Analysis result giving the rectangle and suggested size

        Returns:
            (font size, wrapped lines). If nothing fits, the smallest size
            and its wrap are returned anyway.
        """
        rect = result.rect
        available_width = rect.width - 2 * self.padding
        available_height = rect.height - 2 * self.padding

        start_size = min(result.font_size, available_height, available_width / 2)
        start_size = int(math.floor(max(start_size, self.min_font_size)))

        if available_width <= 0 or available_height <= 0:
            logger.warning(
                f"Rectangle {rect.width}x{rect.height} leaves no room inside "
                f"{self.padding}px padding; no text laid out"
            )
            return self.min_font_size, []

        lines: List[str] = []
        for size in range(start_size, self.min_font_size - 1, -1):
            font = self._font(size)
            lines = self.wrap_text(surface, text, available_width, font)

            block_height = len(lines) * size * self.line_height_multiplier
            fits_width = all(surface.measure_text(line, font) <= available_width for line in lines)

            if block_height <= available_height and fits_width:
                if size < start_size:
                    logger.debug(f"Font shrunk {start_size}px -> {size}px to fit {len(lines)} line(s)")
                return size, lines

        logger.warning(
            f"Text does not fit {rect.width}x{rect.height} even at {self.min_font_size}px; "
            f"drawing {len(lines)} overflowing line(s)"
        )
        return self.min_font_size, lines

    def decide_alignment(self, rect: Rect, canvas_width: float, canvas_height: float) -> Tuple[str, str]:
        """
        Align text toward the canvas edge the rectangle sits near

        Returns:
            (horizontal, vertical) alignment
        """
        center_x, center_y = rect.center

        h_align = "center"
        if center_x < canvas_width * 0.35:
            h_align = "left"
        elif center_x > canvas_width * 0.65:
            h_align = "right"

        v_align = "middle"
        if center_y < canvas_height * 0.35:
            v_align = "top"
        elif center_y > canvas_height * 0.65:
            v_align = "bottom"

        return h_align, v_align

    def plan(
        self,
        surface: RenderSurface,
        text: str,
        result: AnalysisResult,
        canvas_width: float,
        canvas_height: float
    ) -> TextLayout:
        """
        Create the complete text layout for a result

        Args:
            surface: Surface used to measure text
            text: Text to place
            result: Analysis result
            canvas_width: Width of the canvas the rectangle lives on
            canvas_height: Height of the canvas the rectangle lives on

        Returns:
            TextLayout
        """
        rect = result.rect
        font_size, lines = self.fit_text(surface, text, result)

        line_height = font_size * self.line_height_multiplier
        block_height = len(lines) * line_height
        h_align, v_align = self.decide_alignment(rect, canvas_width, canvas_height)

        if h_align == "left":
            x = rect.x + self.padding
        elif h_align == "right":
            x = rect.x + rect.width - self.padding
        else:
            x = rect.x + rect.width / 2

        available_height = rect.height - 2 * self.padding
        if v_align == "top":
            y = rect.y + self.padding
        elif v_align == "bottom":
            y = rect.y + rect.height - self.padding - block_height
        else:
            y = rect.y + self.padding + (available_height - block_height) / 2

        layout = TextLayout(
            rect=rect,
            text_color=result.text_color,
            lines=tuple(lines),
            font_size=font_size,
            line_height=line_height,
            block_height=block_height,
            h_align=h_align,
            v_align=v_align,
            x=x,
            y=y,
            scrim=self.select_scrim(result),
        )

        logger.debug(
            f"Planned {len(lines)} line(s) at {font_size}px, "
            f"align={h_align}/{v_align}, scrim={layout.scrim is not None}"
        )

        return layout

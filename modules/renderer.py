"""
Renderer Module - Draw text layouts and grid diagnostics onto a surface
"""

from typing import Optional, Tuple

from loguru import logger

from modules.layout import LayoutEngine, TextLayout
from modules.models import AnalysisResult, GridStats
from modules.surface import FontSpec, RenderSurface

GRID_LINE_COLOR = (200, 200, 200, 128)
SWATCH_OUTLINE_COLOR = (0, 0, 0, 128)
LABEL_COLOR = (0, 0, 0, 179)
HOVER_COLOR = (0, 255, 0, 230)
DARK_TEXT_RECT_COLOR = (0, 255, 0, 204)
LIGHT_TEXT_RECT_COLOR = (0, 0, 255, 204)


class Renderer:
    """
    Renders analysis results by issuing draw calls against a RenderSurface
    """

    def __init__(self, layout_engine: LayoutEngine = None):
        """
        Initialize Renderer

        Args:
            layout_engine: Layout engine used to plan text (default: from settings)
        """
        self.layout_engine = layout_engine or LayoutEngine()
        logger.info("Renderer initialized")

    def render_text(
        self,
        surface: RenderSurface,
        text: str,
        result: AnalysisResult,
        canvas_width: float,
        canvas_height: float
    ) -> TextLayout:
        """
        Plan and draw text into the result's rectangle

        Args:
            surface: Surface to draw on
            text: Text to render
            result: Analysis result
            canvas_width: Width of the canvas the result was computed for
            canvas_height: Height of the canvas the result was computed for

        Returns:
            The layout that was drawn
        """
        layout = self.layout_engine.plan(surface, text, result, canvas_width, canvas_height)
        self.draw_layout(surface, layout)
        return layout

    def draw_layout(self, surface: RenderSurface, layout: TextLayout) -> None:
        """
        Draw scrim (if any) and text lines

        Args:
            surface: Surface to draw on
            layout: Planned layout
        """
        rect = layout.rect

        if layout.scrim is not None:
            surface.fill_rect(rect.x, rect.y, rect.width, rect.height, layout.scrim.rgba)

        if not layout.lines:
            return

        surface.set_font(FontSpec(size=layout.font_size, family=self.layout_engine.font_family))
        for line, x, y in layout.line_positions():
            surface.fill_text(line, x, y, layout.text_color, align=layout.h_align, baseline="top")

        logger.debug(f"Drew {len(layout.lines)} line(s) in {layout.text_color}")

    def draw_hover_overlay(
        self,
        surface: RenderSurface,
        grid: GridStats,
        result: Optional[AnalysisResult] = None,
        hovered_cell: Optional[Tuple[int, int]] = None
    ) -> None:
        """
        Draw per-cell diagnostics: grid lines, color swatches, busyness labels

        Args:
            surface: Surface to draw on (same size the grid was computed for)
            grid: Grid statistics
            result: Optional result whose rectangle is outlined
            hovered_cell: Optional (row, col) to highlight
        """
        cell_w, cell_h = grid.cell_width_px, grid.cell_height_px
        label_size = int(max(8, min(cell_w * 0.15, cell_h * 0.15)))
        swatch_size = min(cell_w, cell_h) * 0.2

        surface.set_font(FontSpec(size=label_size, family=self.layout_engine.font_family))

        for r in range(grid.grid_config.rows):
            for c in range(grid.grid_config.cols):
                stat = grid.cell(r, c)
                x = c * cell_w
                y = r * cell_h

                surface.stroke_rect(x, y, cell_w, cell_h, GRID_LINE_COLOR, 1)

                surface.fill_rect(x + 2, y + 2, swatch_size, swatch_size, tuple(stat.avg_color) + (255,))
                surface.stroke_rect(x + 2, y + 2, swatch_size, swatch_size, SWATCH_OUTLINE_COLOR, 1)

                surface.fill_text(
                    f"{stat.busyness:.0f}", x + swatch_size + 4, y + 2, LABEL_COLOR,
                    align="left", baseline="top"
                )

                if hovered_cell == (r, c):
                    surface.stroke_rect(x, y, cell_w, cell_h, HOVER_COLOR, 2)

        if result is not None:
            color = DARK_TEXT_RECT_COLOR if result.text_color.rgb == (0, 0, 0) else LIGHT_TEXT_RECT_COLOR
            rect = result.rect
            surface.stroke_rect(rect.x, rect.y, rect.width, rect.height, color, 3)

        logger.debug(f"Drew hover overlay for {grid.grid_config.rows}x{grid.grid_config.cols} grid")

"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from modules.models import (
    RGB,
    AnalysisResult,
    CellSpan,
    CellStat,
    GridConfig,
    GridStats,
    PixelBuffer,
    Rect,
    RectCandidate,
    ShapeCandidate,
    TextColor,
)


def solid_pixels(width: int, height: int, color=(0, 0, 0)) -> PixelBuffer:
    """Uniform RGB image"""
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :] = color
    return PixelBuffer.from_array(array)


def noise_pixels(width: int, height: int, seed: int = 7) -> np.ndarray:
    """Random RGB array (mutable, for carving calm regions into)"""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def grid_from_colors(colors, busyness=0.0, cell_px=10) -> GridStats:
    """GridStats built directly from a 2D list of cell colors"""
    rows, cols = len(colors), len(colors[0])
    stats = tuple(
        CellStat(avg_color=RGB(*map(float, color)), busyness=busyness)
        for row in colors
        for color in row
    )
    return GridStats(
        stats=stats,
        grid_config=GridConfig(rows, cols),
        cell_width_px=float(cell_px),
        cell_height_px=float(cell_px),
        canvas_width=cols * cell_px,
        canvas_height=rows * cell_px,
    )


def make_rect_candidate(grid: GridStats, rows: int, cols: int, r_start: int = 0, c_start: int = 0) -> RectCandidate:
    """RectCandidate covering a block of a grid, with the block's mean color"""
    colors = grid.color_grid[r_start:r_start + rows, c_start:c_start + cols].reshape(-1, 3).mean(axis=0)
    return RectCandidate(
        x=int(c_start * grid.cell_width_px),
        y=int(r_start * grid.cell_height_px),
        width=int(cols * grid.cell_width_px),
        height=int(rows * grid.cell_height_px),
        avg_color=RGB(*map(float, colors)),
        r_start=r_start,
        c_start=c_start,
        avg_busyness=0.0,
        shape=ShapeCandidate("square", rows, cols),
    )


def make_result(
    rect=(0, 0, 200, 100),
    text_color: TextColor = None,
    font_size: float = 40.0,
    contrast: float = 21.0,
    busyness: float = 0.0,
) -> AnalysisResult:
    return AnalysisResult(
        rect=Rect(*rect),
        text_color=text_color or TextColor.white(),
        font_size=font_size,
        avg_background_color=RGB(0.0, 0.0, 0.0),
        aspect_ratio_name="square",
        actual_cells=CellSpan(3, 4),
        rect_busyness=busyness,
        text_contrast_ratio=contrast,
    )


class FakeSurface:
    """
    Deterministic RenderSurface: every character is half the font size wide.
    Records draw calls as tuples.
    """

    def __init__(self):
        self.calls = []
        self.font = None

    def measure_text(self, text, font):
        return len(text) * font.size * 0.5

    def set_font(self, font):
        self.font = font
        self.calls.append(("set_font", font.size))

    def fill_rect(self, x, y, width, height, rgba):
        self.calls.append(("fill_rect", x, y, width, height, tuple(rgba)))

    def stroke_rect(self, x, y, width, height, rgba, line_width=1):
        self.calls.append(("stroke_rect", x, y, width, height, tuple(rgba), line_width))

    def fill_text(self, text, x, y, color, align="left", baseline="top"):
        self.calls.append(("fill_text", text, x, y, color, align, baseline))

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def black_image() -> PixelBuffer:
    return solid_pixels(100, 100, (0, 0, 0))

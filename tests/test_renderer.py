"""Tests for drawing layouts and hover diagnostics."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from modules.grid_stats import compute_grid_stats
from modules.layout import LayoutEngine
from modules.models import GridConfig, TextColor
from modules.renderer import (
    DARK_TEXT_RECT_COLOR,
    GRID_LINE_COLOR,
    HOVER_COLOR,
    LIGHT_TEXT_RECT_COLOR,
    Renderer,
)
from modules.surface import FontSpec, PillowSurface, _to_rgba
from tests.conftest import make_result, solid_pixels


@pytest.fixture
def renderer() -> Renderer:
    return Renderer(LayoutEngine(padding=10, min_font_size=8))


class TestRenderText:

    def test_draws_lines_in_order(self, renderer, surface):
        result = make_result(rect=(0, 0, 200, 100), font_size=40.0)

        layout = renderer.render_text(surface, "Hello world", result, 1000, 1000)

        assert surface.named("fill_rect") == []
        assert surface.named("set_font") == [("set_font", 33)]
        texts = surface.named("fill_text")
        assert [call[1] for call in texts] == ["Hello", "world"]
        assert all(call[4] == TextColor.white() for call in texts)
        assert all(call[5] == "left" and call[6] == "top" for call in texts)
        assert layout.lines == ("Hello", "world")

    def test_scrim_drawn_before_text(self, renderer, surface):
        result = make_result(rect=(0, 0, 200, 100), contrast=2.0)

        renderer.render_text(surface, "Hello", result, 1000, 1000)

        assert surface.calls[0] == ("fill_rect", 0, 0, 200, 100, (0, 0, 0, 178))
        assert surface.calls[-1][0] == "fill_text"

    def test_empty_text_draws_nothing(self, renderer, surface):
        renderer.render_text(surface, "   ", make_result(), 1000, 1000)

        assert surface.named("fill_text") == []

    def test_right_aligned_text_anchor(self, renderer, surface):
        result = make_result(rect=(800, 0, 200, 100), font_size=20.0)

        renderer.render_text(surface, "Hi", result, 1000, 1000)

        (call,) = surface.named("fill_text")
        assert call[2] == 990
        assert call[5] == "right"


class TestHoverOverlay:

    def test_draws_every_cell(self, renderer, surface):
        grid = compute_grid_stats(solid_pixels(100, 100, (10, 20, 30)), GridConfig(2, 2))

        renderer.draw_hover_overlay(surface, grid)

        strokes = surface.named("stroke_rect")
        assert len([s for s in strokes if s[5] == GRID_LINE_COLOR]) == 4
        assert len(strokes) == 8  # grid line + swatch outline per cell
        swatches = surface.named("fill_rect")
        assert len(swatches) == 4
        assert swatches[0] == ("fill_rect", 2, 2, 10.0, 10.0, (10.0, 20.0, 30.0, 255))
        labels = surface.named("fill_text")
        assert [call[1] for call in labels] == ["0", "0", "0", "0"]
        assert labels[1][2] == pytest.approx(50 + 10 + 4)

    def test_label_font_size(self, renderer, surface):
        grid = compute_grid_stats(solid_pixels(100, 100), GridConfig(2, 2))

        renderer.draw_hover_overlay(surface, grid)

        # 15% of a 50px cell is below the 8px floor
        assert surface.named("set_font") == [("set_font", 8)]

    def test_hovered_cell_highlighted(self, renderer, surface):
        grid = compute_grid_stats(solid_pixels(100, 100), GridConfig(2, 2))

        renderer.draw_hover_overlay(surface, grid, hovered_cell=(1, 0))

        hover = [s for s in surface.named("stroke_rect") if s[5] == HOVER_COLOR]
        assert hover == [("stroke_rect", 0.0, 50.0, 50.0, 50.0, HOVER_COLOR, 2)]

    @pytest.mark.parametrize("text_color, outline", [
        (TextColor.black(), DARK_TEXT_RECT_COLOR),
        (TextColor.white(), LIGHT_TEXT_RECT_COLOR),
        (TextColor(0, 0, 0), DARK_TEXT_RECT_COLOR),
        (TextColor(200, 10, 10), LIGHT_TEXT_RECT_COLOR),
    ])
    def test_result_outline_color(self, renderer, surface, text_color, outline):
        grid = compute_grid_stats(solid_pixels(100, 100), GridConfig(2, 2))
        result = make_result(rect=(0, 0, 40, 30), text_color=text_color)

        renderer.draw_hover_overlay(surface, grid, result)

        assert surface.calls[-1] == ("stroke_rect", 0, 0, 40, 30, outline, 3)

    def test_empty_cells_label(self, renderer, surface):
        grid = compute_grid_stats(solid_pixels(5, 5), GridConfig(10, 10))

        renderer.draw_hover_overlay(surface, grid)

        assert surface.named("fill_text")[0][1] == "inf"


class TestPillowSurface:

    def test_color_channels_round_half_up(self):
        assert _to_rgba((0.5, 1.5, 2.5)) == (1, 2, 3, 255)
        assert _to_rgba((127.5, 128.5, 254.5, 127.5)) == (128, 129, 255, 128)
        assert _to_rgba(TextColor(1, 2, 3)) == (1, 2, 3, 255)

    def test_translucent_fill_blends(self):
        surface = PillowSurface(Image.new("RGB", (20, 20), (0, 0, 0)))

        surface.fill_rect(0, 0, 10, 10, (255, 255, 255, 128))

        pixels = np.asarray(surface.to_image())
        assert abs(int(pixels[5, 5, 0]) - 128) <= 1
        assert pixels[15, 15].tolist() == [0, 0, 0]

    def test_measure_text_grows_with_text_and_size(self):
        surface = PillowSurface(Image.new("RGB", (20, 20)))

        short = surface.measure_text("Hi", FontSpec(size=20))
        long = surface.measure_text("Hi there", FontSpec(size=20))
        bigger = surface.measure_text("Hi there", FontSpec(size=40))

        assert 0 < short < long < bigger

    def test_render_changes_pixels_inside_rect(self, renderer):
        canvas = Image.new("RGB", (200, 100), (0, 0, 0))
        surface = PillowSurface(canvas)
        result = make_result(rect=(0, 0, 200, 100), font_size=30.0)

        renderer.render_text(surface, "Hello", result, 200, 100)

        pixels = np.asarray(surface.to_image())
        assert pixels.max() > 0
        assert surface.to_pixel_buffer().width == 200

    def test_source_image_not_modified(self):
        canvas = Image.new("RGB", (20, 20), (0, 0, 0))
        surface = PillowSurface(canvas)

        surface.fill_rect(0, 0, 20, 20, (255, 0, 0, 255))

        assert canvas.getpixel((5, 5)) == (0, 0, 0)

"""Tests for the data model."""

from __future__ import annotations

import json

import numpy as np
import pytest
from PIL import Image

from modules.models import AnalysisResult, PixelBuffer, ShapeCandidate, TextColor
from tests.conftest import make_result


class TestPixelBuffer:

    def test_from_rgba_bytes(self):
        buffer = PixelBuffer.from_rgba_bytes(bytes(range(24)), 3, 2)

        assert (buffer.width, buffer.height) == (3, 2)
        assert buffer.data[1, 2].tolist() == [20, 21, 22, 23]

    def test_from_rgba_bytes_wrong_length(self):
        with pytest.raises(ValueError):
            PixelBuffer.from_rgba_bytes(bytes(10), 3, 2)

    def test_from_rgba_bytes_negative_size(self):
        with pytest.raises(ValueError):
            PixelBuffer.from_rgba_bytes(b"", -1, 0)

    def test_from_array_adds_alpha(self):
        buffer = PixelBuffer.from_array(np.full((2, 2, 3), 9, dtype=np.uint8))
        assert buffer.data[0, 0].tolist() == [9, 9, 9, 255]

    def test_from_image(self):
        buffer = PixelBuffer.from_image(Image.new("RGBA", (4, 3), (1, 2, 3, 4)))
        assert buffer.data[2, 3].tolist() == [1, 2, 3, 4]

    def test_data_is_read_only_copy(self):
        source = np.zeros((2, 2, 4), dtype=np.uint8)
        buffer = PixelBuffer(source)

        source[0, 0] = 255
        assert buffer.data[0, 0].tolist() == [0, 0, 0, 0]
        with pytest.raises(ValueError):
            buffer.data[0, 0] = 1

    def test_rejects_bad_input(self):
        with pytest.raises(TypeError):
            PixelBuffer(None)
        with pytest.raises(ValueError):
            PixelBuffer(np.zeros((2, 2, 3), dtype=np.uint8))


class TestTextColor:

    @pytest.mark.parametrize("css", ["black", "white", "rgb(10, 21, 31)", "rgb(0, 0, 0)"])
    def test_css_round_trip(self, css):
        assert str(TextColor.parse(css)) == css

    def test_parse_compact_rgb(self):
        assert TextColor.parse("rgb(1,2,3)").rgb == (1, 2, 3)

    @pytest.mark.parametrize("css", ["red", "#fff", "rgb(1, 2)", "rgba(1, 2, 3, 4)", ""])
    def test_parse_rejects_other_forms(self, css):
        with pytest.raises(ValueError):
            TextColor.parse(css)

    def test_from_rgb_rounds_half_up(self):
        assert TextColor.from_rgb((0.5, 1.5, 254.5)).rgb == (1, 2, 255)

    def test_named_and_unnamed_black_differ(self):
        assert TextColor.black().rgb == TextColor(0, 0, 0).rgb
        assert TextColor.black().css != TextColor(0, 0, 0).css


class TestAnalysisResult:

    def test_dict_round_trip_through_json(self):
        result = make_result(text_color=TextColor(10, 21, 31), contrast=4.5, busyness=12.25)

        restored = AnalysisResult.from_dict(json.loads(json.dumps(result.to_dict())))

        assert restored == result

    def test_to_dict_keys(self):
        data = make_result().to_dict()

        assert data["rect"] == {"x": 0, "y": 0, "width": 200, "height": 100}
        assert data["text_color"] == "white"
        assert data["actual_cells"] == {"rows": 3, "cols": 4}
        assert data["avg_background_color"] == {"r": 0.0, "g": 0.0, "b": 0.0}

    @pytest.mark.parametrize("data", [
        {},
        {"rect": None},
        {"rect": {"x": 0}},
    ])
    def test_from_dict_malformed(self, data):
        with pytest.raises(ValueError):
            AnalysisResult.from_dict(data)

    def test_from_dict_bad_color(self):
        data = make_result().to_dict()
        data["text_color"] = "purple"

        with pytest.raises(ValueError):
            AnalysisResult.from_dict(data)


def test_shape_area():
    assert ShapeCandidate("landscape", 3, 5).area == 15

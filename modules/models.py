"""
Data Model - Pixel buffers, grid statistics and analysis results
"""

import math
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np
from PIL import Image

from utils.color_utils import round_half_up


class RGB(NamedTuple):
    """Color with (possibly fractional) 0-255 channels"""
    r: float
    g: float
    b: float


class CellSpan(NamedTuple):
    """Rectangle size measured in grid cells"""
    rows: int
    cols: int


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Read-only RGBA pixel data

    ``data`` is a uint8 array of shape (height, width, 4). The array is
    copied on construction and marked non-writeable, so the buffer can be
    shared freely between analysis runs.
    """
    data: np.ndarray

    def __post_init__(self):
        if self.data is None:
            raise TypeError("Pixel data is required")

        array = np.asarray(self.data)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Pixel data must have shape (height, width, 4), got {array.shape}")

        array = np.array(array, dtype=np.uint8, copy=True)
        array.setflags(write=False)
        object.__setattr__(self, "data", array)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @classmethod
    def from_rgba_bytes(cls, data: bytes, width: int, height: int) -> "PixelBuffer":
        """
        Build a buffer from raw RGBA bytes (row-major, 4 bytes per pixel)

        Args:
            data: Raw RGBA samples
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            PixelBuffer
        """
        if width < 0 or height < 0:
            raise ValueError(f"Negative image size: {width}x{height}")
        if len(data) != width * height * 4:
            raise ValueError(
                f"Expected {width * height * 4} bytes for {width}x{height} RGBA, got {len(data)}"
            )

        samples = np.array(bytearray(data), dtype=np.uint8)
        return cls(samples.reshape(height, width, 4))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from a grayscale, RGB or RGBA numpy array

        Missing alpha is filled with 255.
        """
        array = np.asarray(array)

        if array.ndim == 2:
            array = np.stack([array, array, array], axis=-1)

        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=-1)

        return cls(array)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a Pillow image of any mode"""
        return cls(np.array(image.convert("RGBA")))


@dataclass(frozen=True)
class GridConfig:
    """Cell partition of a pixel buffer"""
    rows: int
    cols: int

    def __post_init__(self):
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"Grid {name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"Grid {name} must not be negative, got {value}")
            object.__setattr__(self, name, int(value))


@dataclass(frozen=True)
class CellStat:
    """Average color and luminance variance of one grid cell"""
    avg_color: RGB
    busyness: float


@dataclass(frozen=True)
class GridStats:
    """
    Per-cell statistics of one (PixelBuffer, GridConfig) pair

    Also serves as the hover snapshot handed to callers that want to draw
    the per-cell diagnostics: it carries everything needed to map grid
    coordinates back to canvas pixels.
    """
    stats: Tuple[CellStat, ...]
    grid_config: GridConfig
    cell_width_px: float
    cell_height_px: float
    canvas_width: int
    canvas_height: int

    def cell(self, row: int, col: int) -> CellStat:
        return self.stats[row * self.grid_config.cols + col]

    @cached_property
    def busyness_grid(self) -> np.ndarray:
        """Busyness as a (rows, cols) float array"""
        values = np.array([stat.busyness for stat in self.stats], dtype=np.float64)
        return values.reshape(self.grid_config.rows, self.grid_config.cols)

    @cached_property
    def color_grid(self) -> np.ndarray:
        """Average colors as a (rows, cols, 3) float array"""
        values = np.array([stat.avg_color for stat in self.stats], dtype=np.float64)
        return values.reshape(self.grid_config.rows, self.grid_config.cols, 3)

    def cell_at(
        self,
        x: float,
        y: float,
        display_width: Optional[float] = None,
        display_height: Optional[float] = None
    ) -> Optional[Tuple[int, int]]:
        """
        Find the grid cell under a pointer

        Args:
            x: Pointer x in display pixels
            y: Pointer y in display pixels
            display_width: Width the canvas is shown at (default: canvas width)
            display_height: Height the canvas is shown at (default: canvas height)

        Returns:
            (row, col) or None when the pointer is outside the grid
        """
        display_width = display_width or self.canvas_width
        display_height = display_height or self.canvas_height

        scaled_x = x * (self.canvas_width / display_width)
        scaled_y = y * (self.canvas_height / display_height)

        col = math.floor(scaled_x / self.cell_width_px)
        row = math.floor(scaled_y / self.cell_height_px)

        if 0 <= row < self.grid_config.rows and 0 <= col < self.grid_config.cols:
            return row, col
        return None

    def to_dict(self) -> Dict:
        """JSON-safe snapshot (infinite busyness becomes None)"""
        return {
            "stats": [
                {
                    "avg_color": list(stat.avg_color),
                    "busyness": stat.busyness if math.isfinite(stat.busyness) else None,
                }
                for stat in self.stats
            ],
            "grid_config": {"rows": self.grid_config.rows, "cols": self.grid_config.cols},
            "cell_width_px": self.cell_width_px,
            "cell_height_px": self.cell_height_px,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
        }


@dataclass(frozen=True)
class ShapeCandidate:
    """Trial rectangle size, in cells"""
    name: str  # 'square', 'near-square', 'landscape' or 'portrait'
    rows: int
    cols: int

    @property
    def area(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class RectCandidate:
    """Best placement found for one shape"""
    x: int
    y: int
    width: int
    height: int
    avg_color: RGB
    r_start: int
    c_start: int
    avg_busyness: float
    shape: ShapeCandidate


@dataclass(frozen=True)
class Rect:
    """Pixel rectangle"""
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


_RGB_PATTERN = re.compile(r"^rgb\((\d+),\s*(\d+),\s*(\d+)\)$")


@dataclass(frozen=True)
class TextColor:
    """
    Text color: either named black/white or an explicit integer triple

    ``str(color)`` gives the CSS form ('black', 'white' or 'rgb(r, g, b)')
    and ``TextColor.parse`` reads it back without loss.
    """
    r: int
    g: int
    b: int
    name: Optional[str] = None

    @classmethod
    def black(cls) -> "TextColor":
        return cls(0, 0, 0, "black")

    @classmethod
    def white(cls) -> "TextColor":
        return cls(255, 255, 255, "white")

    @classmethod
    def from_rgb(cls, rgb) -> "TextColor":
        """Unnamed color with channels rounded half-up to integers"""
        return cls(round_half_up(rgb[0]), round_half_up(rgb[1]), round_half_up(rgb[2]))

    @classmethod
    def parse(cls, value: str) -> "TextColor":
        value = value.strip()
        if value == "black":
            return cls.black()
        if value == "white":
            return cls.white()

        match = _RGB_PATTERN.match(value)
        if not match:
            raise ValueError(f"Unrecognized text color: {value!r}")
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    @property
    def rgb(self) -> RGB:
        return RGB(self.r, self.g, self.b)

    @property
    def css(self) -> str:
        return self.name or f"rgb({self.r}, {self.g}, {self.b})"

    def __str__(self) -> str:
        return self.css


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one placement analysis"""
    rect: Rect
    text_color: TextColor
    font_size: float
    avg_background_color: RGB
    aspect_ratio_name: str
    actual_cells: CellSpan
    rect_busyness: float
    text_contrast_ratio: float

    def to_dict(self) -> Dict:
        return {
            "rect": {
                "x": self.rect.x,
                "y": self.rect.y,
                "width": self.rect.width,
                "height": self.rect.height,
            },
            "text_color": self.text_color.css,
            "font_size": self.font_size,
            "avg_background_color": {
                "r": self.avg_background_color.r,
                "g": self.avg_background_color.g,
                "b": self.avg_background_color.b,
            },
            "aspect_ratio_name": self.aspect_ratio_name,
            "actual_cells": {"rows": self.actual_cells.rows, "cols": self.actual_cells.cols},
            "rect_busyness": self.rect_busyness,
            "text_contrast_ratio": self.text_contrast_ratio,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "AnalysisResult":
        """
        Rebuild a result produced by ``to_dict``

        Lets a caller re-render new text over a cached analysis without
        analyzing the image again.
        """
        try:
            rect = data["rect"]
            background = data["avg_background_color"]
            cells = data["actual_cells"]
            return cls(
                rect=Rect(int(rect["x"]), int(rect["y"]), int(rect["width"]), int(rect["height"])),
                text_color=TextColor.parse(data["text_color"]),
                font_size=float(data["font_size"]),
                avg_background_color=RGB(
                    float(background["r"]), float(background["g"]), float(background["b"])
                ),
                aspect_ratio_name=str(data["aspect_ratio_name"]),
                actual_cells=CellSpan(int(cells["rows"]), int(cells["cols"])),
                rect_busyness=float(data["rect_busyness"]),
                text_contrast_ratio=float(data["text_contrast_ratio"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed analysis result: {e}") from e

    def summary(self) -> List[str]:
        """Human-readable report lines"""
        bg = self.avg_background_color
        return [
            f"Best aspect ratio found: {self.aspect_ratio_name} "
            f"(using {self.actual_cells.rows}x{self.actual_cells.cols} cells)",
            f"Recommended text color: {self.text_color} "
            f"on rgb({round_half_up(bg.r)}, {round_half_up(bg.g)}, {round_half_up(bg.b)})",
            f"Rectangle busyness: {self.rect_busyness:.2f}",
            f"Text contrast ratio: {self.text_contrast_ratio:.2f}:1",
            f"Suggested initial font size: {self.font_size:.0f}px (actual render size may vary)",
            f"Suggested area (X, Y, Width, Height): "
            f"{self.rect.x}, {self.rect.y}, {self.rect.width}, {self.rect.height}",
        ]


@dataclass(frozen=True)
class AnalysisOutcome:
    """Analysis result (None when no placement was found) plus hover snapshot"""
    result: Optional[AnalysisResult]
    hover_data: Optional[GridStats]

    @property
    def success(self) -> bool:
        return self.result is not None

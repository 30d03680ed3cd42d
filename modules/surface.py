"""
Rendering Surface Module - Drawing capability used by the layout engine and renderer
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence, Tuple, Union

from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from config import settings
from modules.models import PixelBuffer, TextColor
from utils.color_utils import round_half_up

ColorLike = Union[TextColor, Sequence[float]]

# Canvas-style alignment names -> Pillow anchor letters
_H_ANCHORS = {"left": "l", "center": "m", "right": "r"}
_V_ANCHORS = {"top": "t", "middle": "m", "bottom": "b", "alphabetic": "s"}


@dataclass(frozen=True)
class FontSpec:
    """Font size and family"""
    size: int
    family: str = settings.FONT_FAMILY

    @property
    def css(self) -> str:
        return f"{self.size}px {self.family}"


class RenderSurface(Protocol):
    """
    Minimal drawing surface

    Any backend implementing these primitives can render layouts.
    """

    def measure_text(self, text: str, font: FontSpec) -> float:
        ...

    def set_font(self, font: FontSpec) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float, rgba: Tuple[int, int, int, int]) -> None:
        ...

    def stroke_rect(
        self, x: float, y: float, width: float, height: float,
        rgba: Tuple[int, int, int, int], line_width: int = 1
    ) -> None:
        ...

    def fill_text(
        self, text: str, x: float, y: float, color: ColorLike,
        align: str = "left", baseline: str = "top"
    ) -> None:
        ...


def _to_rgba(color: ColorLike) -> Tuple[int, int, int, int]:
    if isinstance(color, TextColor):
        return color.r, color.g, color.b, 255

    channels = [round_half_up(value) for value in color]
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


class PillowSurface:
    """
    RenderSurface backed by a Pillow RGBA image
    """

    def __init__(self, image: Image.Image, font_path: Optional[Path] = None):
        """
        Initialize Pillow Surface

        Args:
            image: Image to draw on (copied, converted to RGBA)
            font_path: TrueType font file (default: FONTS_DIR / FONT_FILE)
        """
        self.image = image.convert("RGBA")
        self.font_path = font_path or settings.FONTS_DIR / settings.FONT_FILE
        self.font = FontSpec(size=16)
        self._fonts: Dict[int, ImageFont.ImageFont] = {}

        logger.info(f"PillowSurface initialized ({self.image.width}x{self.image.height})")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def _load_font(self, size: int):
        """
        Load (and cache) the configured font at a pixel size

        Falls back to a system font of the same name, then to Pillow's
        built-in font.
        """
        size = max(1, int(size))
        if size in self._fonts:
            return self._fonts[size]

        try:
            if Path(self.font_path).exists():
                font = ImageFont.truetype(str(self.font_path), size)
            else:
                font = ImageFont.truetype(Path(self.font_path).name, size)
        except OSError as e:
            logger.warning(f"Failed to load font {self.font_path}: {e}, using default")
            font = ImageFont.load_default(size=size)

        self._fonts[size] = font
        return font

    def measure_text(self, text: str, font: FontSpec) -> float:
        return float(self._load_font(font.size).getlength(text))

    def set_font(self, font: FontSpec) -> None:
        self.font = font

    def fill_rect(self, x: float, y: float, width: float, height: float, rgba: Tuple[int, int, int, int]) -> None:
        """
        Fill a rectangle, alpha-blending translucent colors over the image
        """
        if width <= 0 or height <= 0:
            return

        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.rectangle(
            [int(x), int(y), int(x + width) - 1, int(y + height) - 1],
            fill=_to_rgba(rgba)
        )
        self.image = Image.alpha_composite(self.image, layer)

    def stroke_rect(
        self, x: float, y: float, width: float, height: float,
        rgba: Tuple[int, int, int, int], line_width: int = 1
    ) -> None:
        if width <= 0 or height <= 0:
            return

        draw = ImageDraw.Draw(self.image, "RGBA")
        draw.rectangle(
            [int(x), int(y), int(x + width) - 1, int(y + height) - 1],
            outline=_to_rgba(rgba),
            width=line_width
        )

    def fill_text(
        self, text: str, x: float, y: float, color: ColorLike,
        align: str = "left", baseline: str = "top"
    ) -> None:
        """
        Draw one line of text with the current font

        Args:
            text: Text to draw
            x: Anchor x (left edge, center or right edge depending on align)
            y: Anchor y (top, middle or bottom depending on baseline)
            color: Text color
            align: 'left', 'center' or 'right'
            baseline: 'top', 'middle', 'bottom' or 'alphabetic'
        """
        anchor = _H_ANCHORS.get(align, "l") + _V_ANCHORS.get(baseline, "t")
        draw = ImageDraw.Draw(self.image, "RGBA")
        draw.text((x, y), text, font=self._load_font(self.font.size), fill=_to_rgba(color), anchor=anchor)

    def to_pixel_buffer(self) -> PixelBuffer:
        """Current RGBA pixels"""
        return PixelBuffer.from_image(self.image)

    def to_image(self) -> Image.Image:
        """Copy of the current image in RGB mode"""
        return self.image.convert("RGB")

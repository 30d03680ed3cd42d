"""
Image utility functions for preparing pixels for analysis
"""

import io
from typing import Tuple, Union

import cv2
import numpy as np
from PIL import Image

from modules.models import PixelBuffer

ImageLike = Union[Image.Image, np.ndarray]


def image_to_array(image: ImageLike) -> np.ndarray:
    """
    Convert an image to an RGB uint8 array

    Args:
        image: Pillow image or numpy array (grayscale, RGB or RGBA)

    Returns:
        Image as numpy array in RGB format
    """
    if isinstance(image, Image.Image):
        return np.array(image.convert("RGB"))

    array = np.asarray(image)
    if array.ndim == 2:
        return np.stack([array, array, array], axis=-1).astype(np.uint8)
    if array.ndim == 3 and array.shape[2] == 4:
        return array[:, :, :3].astype(np.uint8)
    if array.ndim == 3 and array.shape[2] == 3:
        return array.astype(np.uint8)

    raise ValueError(f"Unsupported image array shape: {array.shape}")


def pixel_buffer_from_image(image: ImageLike) -> PixelBuffer:
    """
    Wrap a Pillow image or numpy array as a read-only RGBA PixelBuffer
    """
    if isinstance(image, Image.Image):
        return PixelBuffer.from_image(image)
    return PixelBuffer.from_array(image)


def _resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image

    # INTER_AREA avoids moire when shrinking; Lanczos keeps edges when enlarging
    shrinking = width < w and height < h
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LANCZOS4
    return cv2.resize(image, (width, height), interpolation=interpolation)


def display_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Size an image is shown at: limited to max_width first, then max_height

    Only ever scales down.
    """
    display_w, display_h = float(width), float(height)

    if display_w > max_width:
        ratio = max_width / display_w
        display_w = max_width
        display_h *= ratio
    if display_h > max_height:
        ratio = max_height / display_h
        display_h = max_height
        display_w *= ratio

    return max(1, int(display_w)), max(1, int(display_h))


def fit_to_display(image: np.ndarray, max_width: int = 800, max_height: int = 600) -> np.ndarray:
    """
    Scale an image down to fit the display box, keeping aspect ratio

    Args:
        image: Input image array
        max_width: Maximum display width
        max_height: Maximum display height

    Returns:
        Resized image (the input itself if it already fits)
    """
    h, w = image.shape[:2]
    if w == 0 or h == 0:
        return image

    new_w, new_h = display_size(w, h, max_width, max_height)
    return _resize(image, new_w, new_h)


def cover_crop(image: np.ndarray, viewport_width: int, viewport_height: int) -> np.ndarray:
    """
    Crop and scale an image to fill a viewport ("object-fit: cover")

    The centered window matching the viewport aspect ratio is taken from
    the source: sides are cropped for wide images, top/bottom for tall ones.

    Args:
        image: Input image array
        viewport_width: Viewport width in pixels
        viewport_height: Viewport height in pixels

    Returns:
        Image of exactly viewport_width x viewport_height
    """
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(f"Viewport must be positive, got {viewport_width}x{viewport_height}")

    h, w = image.shape[:2]
    if w == 0 or h == 0:
        raise ValueError("Cannot crop an empty image")

    image_aspect = w / h
    viewport_aspect = viewport_width / viewport_height

    if image_aspect > viewport_aspect:
        # Wider than viewport: crop the sides
        src_h = h
        src_w = h * viewport_aspect
        src_x = (w - src_w) / 2
        src_y = 0.0
    else:
        # Taller than viewport: crop top and bottom
        src_w = w
        src_h = w / viewport_aspect
        src_x = 0.0
        src_y = (h - src_h) / 2

    x0 = int(round(src_x))
    y0 = int(round(src_y))
    x1 = min(w, x0 + max(1, int(round(src_w))))
    y1 = min(h, y0 + max(1, int(round(src_h))))

    cropped = np.ascontiguousarray(image[y0:y1, x0:x1])
    return _resize(cropped, viewport_width, viewport_height)


def encode_png(image: ImageLike) -> bytes:
    """
    Encode an image as PNG bytes

    Args:
        image: Pillow image or numpy array

    Returns:
        PNG file contents
    """
    if not isinstance(image, Image.Image):
        image = Image.fromarray(np.asarray(image))

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()

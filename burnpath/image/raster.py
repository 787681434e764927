"""
Platform Rasterization

Composites the bitmaps of a scan layer onto one white grid covering the
whole document and converts it to a luma grid in scan order.
"""

from typing import Optional, Sequence, Tuple
import logging

import numpy as np
from PIL import Image

from ..core.items import ImageObject

logger = logging.getLogger(__name__)

# Rec. 709 luma weights, applied in linear light
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def platform_size(doc_width: float, doc_height: float,
                  line_density: float) -> Tuple[int, int]:
    """
    Pixel size of the platform grid.

    Args:
        doc_width, doc_height: Document size in mm
        line_density: Lines per mm

    Raises:
        ValueError: if the grid would be empty.
    """
    if line_density <= 0:
        raise ValueError(f"line density must be positive, got {line_density}")
    width = round(doc_width * line_density)
    height = round(doc_height * line_density)
    if width <= 0 or height <= 0:
        raise ValueError(f"Document {doc_width}x{doc_height} mm is too small "
                         f"for {line_density} lines/mm")
    return width, height


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """sRGB channel values 0..255 to linear light 0..1."""
    c = values.astype(np.float64) / 255.0
    return np.where(c < 0.04045, c / 12.92, np.power((c + 0.055) / 1.055, 2.4))


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Linear light 0..1 to rounded sRGB values 0..255."""
    l = np.clip(values, 0.0, 1.0)
    c = np.where(l > 0.0031308, 1.055 * np.power(l, 1.0 / 2.4) - 0.055, 12.92 * l)
    return np.rint(c * 255.0).astype(np.int16)


def luminance(rgb: np.ndarray, negative: bool = False) -> np.ndarray:
    """
    Perceptual luma of an RGB grid.

    Args:
        rgb: HxWx3 uint8 array
        negative: Invert in linear light before converting back

    Returns:
        HxW int16 array of values 0..255.
    """
    linear = srgb_to_linear(rgb[..., :3]) @ LUMA_WEIGHTS
    if negative:
        linear = 1.0 - linear
    return linear_to_srgb(linear)


def render_platform(images: Sequence[ImageObject], doc_width: float, doc_height: float,
                    line_density: float,
                    canvas_size: Optional[Tuple[float, float]] = None) -> Image.Image:
    """
    Paste every image onto a white platform grid.

    Image positions and sizes are in canvas units; they are scaled by
    grid size / canvas size. The canvas defaults to the document size.
    """
    width, height = platform_size(doc_width, doc_height, line_density)
    canvas_width, canvas_height = canvas_size or (doc_width, doc_height)
    scale_x = width / canvas_width
    scale_y = height / canvas_height

    platform = Image.new('RGB', (width, height), (255, 255, 255))
    for item in images:
        if item.pixel_source is None:
            logger.warning(f"Image {item.id} has no pixel data, skipping")
            continue

        dest_width = max(1, round(item.width * scale_x))
        dest_height = max(1, round(item.height * scale_y))
        bitmap = item.pixel_source.convert('RGBA').resize(
            (dest_width, dest_height), Image.Resampling.LANCZOS)
        if item.rotation:
            # Canvas angles turn clockwise on screen, Pillow's turn counter-clockwise
            bitmap = bitmap.rotate(-item.rotation, resample=Image.Resampling.BICUBIC,
                                   expand=True)

        left = round(item.x * scale_x - bitmap.width / 2)
        top = round(item.y * scale_y - bitmap.height / 2)
        platform.paste(bitmap, (left, top), bitmap)

    logger.debug(f"Rendered {len(images)} images onto a {width}x{height} platform")
    return platform


def platform_luma(images: Sequence[ImageObject], doc_width: float, doc_height: float,
                  line_density: float, negative: bool = False,
                  h_flipped: bool = False, v_flipped: bool = False,
                  canvas_size: Optional[Tuple[float, float]] = None) -> np.ndarray:
    """Luma grid of the platform, row 0 at the top of the document."""
    platform = render_platform(images, doc_width, doc_height, line_density, canvas_size)
    luma = luminance(np.asarray(platform, dtype=np.uint8), negative)
    if h_flipped:
        luma = np.fliplr(luma)
    if v_flipped:
        luma = np.flipud(luma)
    return np.ascontiguousarray(luma)

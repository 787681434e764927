"""
Image Importer for BurnPath

Loads raster images as ImageObject items. The bitmap is kept as-is and
only converted to scan lines when the scan layer is emitted.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import io
import logging

from PIL import Image, UnidentifiedImageError

from ..core.items import ImageObject
from ..errors import ParseError

logger = logging.getLogger(__name__)

# Larger bitmaps are downscaled to keep scan programs a sensible size
MAX_IMAGE_DIMENSION = 2000
MM_PER_INCH = 25.4


class ImageImporter:
    """
    Import raster images for scan engraving.

    Creates an ImageObject holding the decoded bitmap; no vectorisation.
    """

    def __init__(self,
                 dpi: float = 254.0,
                 max_size_mm: Optional[Tuple[float, float]] = None):
        """
        Initialize image importer.

        Args:
            dpi: Resolution used to size the image (dots per inch)
            max_size_mm: Maximum size in mm (width, height). If None, uses image size at DPI.
        """
        self.dpi = dpi
        self.max_size_mm = max_size_mm

    def load(self, source: Union[str, Path, bytes]) -> Image.Image:
        """
        Decode a bitmap and flatten it to RGB on a white background.

        Raises:
            ParseError: if Pillow cannot identify the data.
        """
        try:
            if isinstance(source, bytes):
                img = Image.open(io.BytesIO(source))
            else:
                img = Image.open(source)
            img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ParseError(f"Unreadable image: {e}") from e

        original_width, original_height = img.size
        if original_width > MAX_IMAGE_DIMENSION or original_height > MAX_IMAGE_DIMENSION:
            scale = min(MAX_IMAGE_DIMENSION / original_width, MAX_IMAGE_DIMENSION / original_height)
            new_width = max(1, int(original_width * scale))
            new_height = max(1, int(original_height * scale))
            img = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
            logger.info(f"Downscaled image from {original_width}x{original_height} "
                        f"to {new_width}x{new_height} pixels")

        if img.mode == 'P' and 'transparency' in img.info:
            img = img.convert('RGBA')
        if img.mode in ('RGBA', 'LA'):
            # Transparent areas burn like white paper
            rgba = img.convert('RGBA')
            background = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
            img = Image.alpha_composite(background, rgba)
        return img.convert('RGB')

    def import_image(self, source: Union[str, Path, bytes],
                     x: float = 0.0, y: float = 0.0) -> ImageObject:
        """
        Import an image as an ImageObject centred on (x, y).

        Args:
            source: File path or encoded image bytes
            x, y: Centre of the image in canvas units

        Returns:
            ImageObject sized in millimetres from the configured DPI.
        """
        img = self.load(source)
        width_px, height_px = img.size

        width_mm = (width_px / self.dpi) * MM_PER_INCH
        height_mm = (height_px / self.dpi) * MM_PER_INCH

        if self.max_size_mm:
            max_width, max_height = self.max_size_mm
            scale = min(max_width / width_mm, max_height / height_mm, 1.0)  # Don't scale up
            width_mm *= scale
            height_mm *= scale

        logger.debug(f"Imported {width_px}x{height_px} image as {width_mm:.2f}x{height_mm:.2f} mm")
        return ImageObject(
            x=x,
            y=y,
            width=width_mm,
            height=height_mm,
            pixel_source=img,
        )

"""
BurnPath Image Processing Module

Platform rasterization and halftone dithering for scan layers.
"""

from .dithering import DitheringMethod, ImageDitherer, WHITE_THRESHOLD
from .raster import luminance, platform_luma, platform_size, render_platform

__all__ = [
    'DitheringMethod', 'ImageDitherer', 'WHITE_THRESHOLD',
    'luminance', 'platform_luma', 'platform_size', 'render_platform',
]

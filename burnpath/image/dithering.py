"""
Image Dithering Module

Error-diffusion dithering that turns a grayscale grid into the on/off
pattern burned in halftone mode.
"""

from enum import Enum
from typing import Optional

import numpy as np

# Pixels at or above this luma count as blank paper
WHITE_THRESHOLD = 220

JARVIS_KERNEL = np.array([[0, 0, 0, 7, 5],
                          [3, 5, 7, 5, 3],
                          [1, 3, 5, 3, 1]], dtype=np.float32) / 48

FLOYD_STEINBERG_KERNEL = np.array([[0, 0, 0, 7, 0],
                                   [0, 3, 5, 1, 0],
                                   [0, 0, 0, 0, 0]], dtype=np.float32) / 16


class DitheringMethod(Enum):
    """Available dithering algorithms."""
    JARVIS_JUDICE_NINKE = "jarvis_judice_ninke"
    FLOYD_STEINBERG = "floyd_steinberg"
    NONE = "none"


class ImageDitherer:
    """Dither grayscale grids for halftone engraving."""

    def __init__(self, method: DitheringMethod = DitheringMethod.JARVIS_JUDICE_NINKE,
                 protect_white: bool = True):
        """
        Args:
            method: Dithering algorithm
            protect_white: Keep pixels that start out white (>= 220) white
                and never diffuse error into them, so blank paper around
                the artwork stays unburned.
        """
        self.method = method
        self.protect_white = protect_white

    def dither(self, image: np.ndarray, threshold: int = 128) -> np.ndarray:
        """
        Apply dithering to a grayscale image.

        Args:
            image: 2D array of luma values 0..255
            threshold: Values below this become black

        Returns:
            uint8 array of 0 and 255 values.
        """
        if image.ndim != 2:
            raise ValueError(f"Expected a 2D grayscale grid, got shape {image.shape}")

        white_mask = None
        if self.protect_white:
            white_mask = image >= WHITE_THRESHOLD

        if self.method == DitheringMethod.NONE:
            result = self._threshold(image, threshold)
        elif self.method == DitheringMethod.FLOYD_STEINBERG:
            result = self._diffuse(image, FLOYD_STEINBERG_KERNEL, threshold, white_mask)
        else:
            result = self._diffuse(image, JARVIS_KERNEL, threshold, white_mask)

        if white_mask is not None:
            result[white_mask] = 255
        return result

    def _threshold(self, image: np.ndarray, threshold: int) -> np.ndarray:
        return np.where(image >= threshold, 255, 0).astype(np.uint8)

    def _diffuse(self, image: np.ndarray, kernel: np.ndarray, threshold: int,
                 white_mask: Optional[np.ndarray]) -> np.ndarray:
        """Error diffusion with a 3x5 kernel centred on column 2 of its first row."""
        result = image.copy().astype(np.float32)
        height, width = result.shape
        output = np.zeros((height, width), dtype=np.uint8)
        taps = [(ky, kx - 2, kernel[ky, kx])
                for ky in range(kernel.shape[0])
                for kx in range(kernel.shape[1])
                if kernel[ky, kx] != 0]

        for y in range(height):
            for x in range(width):
                old_pixel = result[y, x]
                new_pixel = 255 if old_pixel >= threshold else 0
                output[y, x] = new_pixel
                error = old_pixel - new_pixel
                if error == 0:
                    continue

                for dy, dx, weight in taps:
                    ny, nx = y + dy, x + dx
                    if ny >= height or nx < 0 or nx >= width:
                        continue
                    if white_mask is not None and white_mask[ny, nx]:
                        continue
                    result[ny, nx] = min(255.0, max(0.0, result[ny, nx] + error * weight))

        return output

from __future__ import annotations

import math

from ..raster import MAXVAL, GrayImage


def negative(image: GrayImage) -> None:
    """Invert every sample against the 8-bit range (255 - s), not maxval."""
    for y in range(image.height):
        for x in range(image.width):
            image.set_pixel(x, y, MAXVAL - image.get_pixel(x, y))


def threshold(image: GrayImage, thr: int) -> None:
    """Set samples below thr to black (0) and all others to maxval."""
    maxval = image.maxval
    for y in range(image.height):
        for x in range(image.width):
            level = 0 if image.get_pixel(x, y) < thr else maxval
            image.set_pixel(x, y, level)


def brighten(image: GrayImage, factor: float) -> None:
    """Multiply every sample by factor, truncating and saturating at maxval."""
    if math.isnan(factor) or factor < 0:
        raise ValueError("Brighten factor must be a non-negative number")
    maxval = image.maxval
    for y in range(image.height):
        for x in range(image.width):
            sample = image.get_pixel(x, y)
            # Black stays black, even for an infinite factor.
            product = sample * factor if sample else 0
            level = maxval if product >= maxval else int(product)
            image.set_pixel(x, y, level)

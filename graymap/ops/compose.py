from __future__ import annotations

from typing import NamedTuple

from ..raster import GrayImage


class Location(NamedTuple):
    found: bool
    x: int
    y: int


NOT_FOUND = Location(False, -1, -1)


def _require_rect(img1: GrayImage, x: int, y: int, img2: GrayImage) -> None:
    if not img1.valid_rect(x, y, img2.width, img2.height):
        raise IndexError(
            f"A {img2.width}x{img2.height} image anchored at ({x}, {y}) "
            f"does not fit the {img1.width}x{img1.height} image"
        )


def paste(img1: GrayImage, x: int, y: int, img2: GrayImage) -> None:
    """Overwrite the rectangle of img1 anchored at (x, y) with img2."""
    _require_rect(img1, x, y, img2)
    for j in range(img2.height):
        for i in range(img2.width):
            img1.set_pixel(x + i, y + j, img2.get_pixel(i, j))


def blend(img1: GrayImage, x: int, y: int, img2: GrayImage, alpha: float) -> None:
    """Mix img2 into img1 at (x, y) as alpha * img1 + (1 - alpha) * img2.

    alpha is not clamped: values outside [0, 1] extrapolate, and the
    truncated result wraps into 8 bits.
    """
    _require_rect(img1, x, y, img2)
    for j in range(img2.height):
        for i in range(img2.width):
            level1 = img1.get_pixel(x + i, y + j)
            level2 = img2.get_pixel(i, j)
            mixed = int(alpha * level1 + (1.0 - alpha) * level2)
            img1.set_pixel(x + i, y + j, mixed & 0xFF)


def match_subimage(img1: GrayImage, x: int, y: int, img2: GrayImage) -> bool:
    """Return True if img2 equals the rectangle of img1 anchored at (x, y)."""
    _require_rect(img1, x, y, img2)
    for j in range(img2.height):
        for i in range(img2.width):
            if img1.get_pixel(x + i, y + j) != img2.get_pixel(i, j):
                return False
    return True


def locate_subimage(img1: GrayImage, img2: GrayImage) -> Location:
    """Find the first anchor, in row-major order, where img2 matches img1."""
    if img2.width > img1.width or img2.height > img1.height:
        return NOT_FOUND
    for y in range(img1.height - img2.height + 1):
        for x in range(img1.width - img2.width + 1):
            if match_subimage(img1, x, y, img2):
                return Location(True, x, y)
    return NOT_FOUND

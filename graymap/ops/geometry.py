from __future__ import annotations

from ..raster import GrayImage


def rotate(image: GrayImage) -> GrayImage:
    """Return a copy rotated 90 degrees counter-clockwise.

    Source (x, y) lands on (y, width - 1 - x) of a height x width image,
    so the top row becomes the left column read bottom-up. This is
    deliberately not the (height - 1 - y, x) mapping, which turns the
    image clockwise.
    """
    width = image.width
    height = image.height
    rotated = GrayImage.create(height, width, image.maxval)
    for y in range(height):
        for x in range(width):
            rotated.set_pixel(y, width - 1 - x, image.get_pixel(x, y))
    return rotated


def mirror(image: GrayImage) -> GrayImage:
    """Return a left-right mirrored copy."""
    width = image.width
    mirrored = GrayImage.create(width, image.height, image.maxval)
    for y in range(image.height):
        for x in range(width):
            mirrored.set_pixel(width - 1 - x, y, image.get_pixel(x, y))
    return mirrored


def crop(image: GrayImage, x: int, y: int, w: int, h: int) -> GrayImage:
    """Return a copy of the w x h rectangle anchored at (x, y)."""
    if not image.valid_rect(x, y, w, h):
        raise IndexError(f"Rectangle ({x}, {y}, {w}, {h}) is outside the {image.width}x{image.height} image")
    cropped = GrayImage.create(w, h, image.maxval)
    for j in range(h):
        for i in range(w):
            cropped.set_pixel(i, j, image.get_pixel(x + i, y + j))
    return cropped

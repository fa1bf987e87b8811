from __future__ import annotations

from typing import List

from ..raster import GrayImage


def _summed_area_table(image: GrayImage) -> List[int]:
    """Return the (width + 1) x (height + 1) table of prefix sums.

    Entry (x, y) holds the sum of all samples left of column x and above row y.
    """
    width = image.width
    stride = width + 1
    table = [0] * (stride * (image.height + 1))
    for y in range(image.height):
        row_sum = 0
        row = image.pixels[y * width : (y + 1) * width]
        above = y * stride
        here = above + stride
        for x, level in enumerate(row):
            row_sum += level
            table[here + x + 1] = table[above + x + 1] + row_sum
    return table


def blur(image: GrayImage, dx: int, dy: int) -> None:
    """Replace each sample by the mean of its (2dx+1) x (2dy+1) neighbourhood.

    Positions outside the image are left out of both the sum and the
    divisor. Means are computed from the original samples and truncated.
    """
    if dx < 0 or dy < 0:
        raise ValueError("Blur radii must not be negative")
    if dx == 0 and dy == 0:
        return
    width = image.width
    height = image.height
    table = _summed_area_table(image.copy())
    stride = width + 1
    for y in range(height):
        top = max(0, y - dy)
        bottom = min(height, y + dy + 1)
        for x in range(width):
            left = max(0, x - dx)
            right = min(width, x + dx + 1)
            total = (
                table[bottom * stride + right]
                - table[top * stride + right]
                - table[bottom * stride + left]
                + table[top * stride + left]
            )
            count = (right - left) * (bottom - top)
            image.set_pixel(x, y, total // count)

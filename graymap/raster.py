from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from . import instrumentation
from .errors import ErrorKind, ImageError
from .instrumentation import PIXMEM

MAXVAL = 255


@dataclass
class GrayImage:
    """Row-major 8-bit grayscale pixel buffer with its declared white level."""

    width: int
    height: int
    maxval: int
    pixels: bytearray = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, bytearray):
            self.pixels = bytearray(self.pixels)
        self.validate()

    def validate(self) -> None:
        """Validate dimensions, maxval and raster length."""
        _check_dimensions(self.width, self.height, self.maxval)
        if len(self.pixels) != self.width * self.height:
            raise ValueError("Pixels length must equal width * height")

    @classmethod
    def create(cls, width: int, height: int, maxval: int = MAXVAL) -> "GrayImage":
        """Return a new all-black image."""
        _check_dimensions(width, height, maxval)
        try:
            pixels = bytearray(width * height)
        except (MemoryError, OverflowError) as exc:
            raise ImageError(ErrorKind.ALLOC_FAILED) from exc
        return cls(width, height, maxval, pixels)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], maxval: int = MAXVAL) -> "GrayImage":
        """Build an image from a list of equally long rows."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        pixels = bytearray()
        for row in rows:
            if len(row) != width:
                raise ValueError("All rows must have the same length")
            pixels.extend(row)
        return cls(width, height, maxval, pixels)

    def rows(self) -> List[List[int]]:
        return [list(self.pixels[y * self.width : (y + 1) * self.width]) for y in range(self.height)]

    def copy(self) -> "GrayImage":
        instrumentation.count(PIXMEM, self.width * self.height)
        return GrayImage(self.width, self.height, self.maxval, bytearray(self.pixels))

    def valid_pos(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def valid_rect(self, x: int, y: int, w: int, h: int) -> bool:
        return 0 <= x and x + w <= self.width and 0 <= y and y + h <= self.height

    def get_pixel(self, x: int, y: int) -> int:
        index = self._index(x, y)
        instrumentation.count(PIXMEM)
        return self.pixels[index]

    def set_pixel(self, x: int, y: int, level: int) -> None:
        index = self._index(x, y)
        instrumentation.count(PIXMEM)
        self.pixels[index] = level

    def stats(self) -> Tuple[int, int]:
        """Return (min, max) of all samples, (0, 0) for an empty image."""
        if not self.pixels:
            return 0, 0
        return min(self.pixels), max(self.pixels)

    def _index(self, x: int, y: int) -> int:
        if not self.valid_pos(x, y):
            raise IndexError(f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} image")
        return y * self.width + x


def _check_dimensions(width: int, height: int, maxval: int) -> None:
    if width < 0:
        raise ValueError("Width must not be negative")
    if height < 0:
        raise ValueError("Height must not be negative")
    if not 0 < maxval <= MAXVAL:
        raise ValueError(f"Maxval must be in 1..{MAXVAL}")


def create(width: int, height: int, maxval: int = MAXVAL) -> GrayImage:
    return GrayImage.create(width, height, maxval)


def destroy(image: Optional[GrayImage]) -> None:
    """Release the pixel storage of an image; None is ignored."""
    if image is None:
        return
    image.pixels = bytearray()
    image.width = 0
    image.height = 0


def image_init(extra_counters: Iterable[str] = ()) -> float:
    """Calibrate instrumentation and register the pixel access counter.

    Returns the measured timer overhead in seconds.
    """
    overhead = instrumentation.calibrate()
    instrumentation.register(PIXMEM)
    for name in extra_counters:
        instrumentation.register(name)
    return overhead

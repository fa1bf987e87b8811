"""Raw PGM (P5) reader and writer.

See http://netpbm.sourceforge.net/doc/pgm.html. Only 8-bit rasters are
accepted: ``maxval`` must be in 1..255.
"""
from __future__ import annotations

import logging
import re
from typing import Tuple

from .. import instrumentation
from ..errors import ErrorKind, ImageError, clear_error
from ..instrumentation import PIXMEM
from ..raster import MAXVAL, GrayImage
from .base import ImageCodec

logger = logging.getLogger(__name__)

MAGIC = b"P5"
WHITESPACE = b" \t\n\v\f\r"

# Whitespace and "#...\n" comments allowed between header fields.
_SEPARATOR_RE = re.compile(rb"(?:[ \t\n\v\f\r]|#[^\n]*(?:\n|\Z))*")
_NUMBER_RE = re.compile(rb"[+-]?[0-9]+")


def _read_number(data: bytes, pos: int, kind: ErrorKind) -> Tuple[int, int]:
    pos = _SEPARATOR_RE.match(data, pos).end()
    match = _NUMBER_RE.match(data, pos)
    if not match:
        raise ImageError(kind)
    return int(match.group()), match.end()


def parse_pgm(data: bytes) -> GrayImage:
    """Decode an in-memory P5 stream into a new image."""
    if not data.startswith(MAGIC):
        raise ImageError(ErrorKind.INVALID_FORMAT)
    width, pos = _read_number(data, len(MAGIC), ErrorKind.INVALID_WIDTH)
    if width < 0:
        raise ImageError(ErrorKind.INVALID_WIDTH)
    height, pos = _read_number(data, pos, ErrorKind.INVALID_HEIGHT)
    if height < 0:
        raise ImageError(ErrorKind.INVALID_HEIGHT)
    maxval, pos = _read_number(data, pos, ErrorKind.INVALID_MAXVAL)
    if not 0 < maxval <= MAXVAL:
        raise ImageError(ErrorKind.INVALID_MAXVAL)
    # Exactly one whitespace byte separates maxval from the raster.
    if pos >= len(data) or data[pos] not in WHITESPACE:
        raise ImageError(ErrorKind.WHITESPACE_EXPECTED)
    pos += 1

    size = width * height
    # The whole stream is in memory, so a short raster is known before allocating.
    available = len(data) - pos
    if available < size:
        raise ImageError(ErrorKind.SHORT_READ, f"expected {size} bytes, got {available}")
    image = GrayImage.create(width, height, maxval)
    instrumentation.count(PIXMEM, size)
    image.pixels[:] = data[pos : pos + size]
    return image


def encode_pgm(image: GrayImage) -> bytes:
    """Encode an image as a P5 stream."""
    instrumentation.count(PIXMEM, image.width * image.height)
    return pgm_header(image) + bytes(image.pixels)


def pgm_header(image: GrayImage) -> bytes:
    return f"P5\n{image.width} {image.height}\n{image.maxval}\n".encode("ascii")


def load_pgm(path: str) -> GrayImage:
    """Load a raw PGM file.

    Raises ImageError naming the first step that failed; no file handle
    is left open.
    """
    step = ErrorKind.OPEN_FAILED
    try:
        with open(path, "rb") as handle:
            step = ErrorKind.SHORT_READ
            data = handle.read()
    except OSError as exc:
        raise ImageError.from_os_error(step, exc) from exc
    image = parse_pgm(data)
    clear_error()
    logger.debug("Loaded %s (%dx%d, maxval %d)", path, image.width, image.height, image.maxval)
    return image


def save_pgm(image: GrayImage, path: str) -> None:
    """Save an image as a raw PGM file.

    On failure a partial file may be left behind.
    """
    header = pgm_header(image)
    step = ErrorKind.OPEN_FAILED
    try:
        with open(path, "wb") as handle:
            step = ErrorKind.WRITE_HEADER_FAILED
            handle.write(header)
            step = ErrorKind.WRITE_PIXELS_FAILED
            handle.write(image.pixels)
    except OSError as exc:
        raise ImageError.from_os_error(step, exc) from exc
    instrumentation.count(PIXMEM, image.width * image.height)
    clear_error()
    logger.debug("Saved %s (%dx%d, maxval %d)", path, image.width, image.height, image.maxval)


class PgmCodec(ImageCodec):
    extensions = (".pgm",)

    def load(self, path: str) -> GrayImage:
        return load_pgm(path)

    def save(self, image: GrayImage, path: str) -> None:
        save_pgm(image, path)

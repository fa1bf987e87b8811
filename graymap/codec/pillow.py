from __future__ import annotations

import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from .. import instrumentation
from ..errors import ErrorKind, ImageError, clear_error
from ..instrumentation import PIXMEM
from ..raster import MAXVAL, GrayImage
from .base import ImageCodec

logger = logging.getLogger(__name__)


def from_pil(img: Image.Image, maxval: int = MAXVAL) -> GrayImage:
    """Copy a Pillow image into a new grayscale image (converted to mode L)."""
    if img.mode != "L":
        img = img.convert("L")
    instrumentation.count(PIXMEM, img.width * img.height)
    return GrayImage(img.width, img.height, maxval, bytearray(img.tobytes()))


def to_pil(image: GrayImage) -> Image.Image:
    """Build a mode L Pillow image from the raster; maxval is not rescaled."""
    if not image.pixels:
        return Image.new("L", (image.width, image.height))
    instrumentation.count(PIXMEM, image.width * image.height)
    return Image.frombytes("L", (image.width, image.height), bytes(image.pixels))


class PillowCodec(ImageCodec):
    extensions = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff")

    def load(self, path: str) -> GrayImage:
        try:
            with Image.open(path) as img:
                img = ImageOps.exif_transpose(img)
                gray = img.convert("L")
        except UnidentifiedImageError as exc:
            raise ImageError(ErrorKind.INVALID_FORMAT, str(exc)) from exc
        except OSError as exc:
            raise ImageError.from_os_error(ErrorKind.OPEN_FAILED, exc) from exc
        image = from_pil(gray)
        clear_error()
        logger.debug("Loaded %s through Pillow (%dx%d)", path, image.width, image.height)
        return image

    def save(self, image: GrayImage, path: str) -> None:
        # Pillow writers reject zero-sized images.
        if not image.width or not image.height:
            raise ImageError(ErrorKind.WRITE_PIXELS_FAILED, f"cannot save a {image.width}x{image.height} image")
        try:
            to_pil(image).save(path)
        except OSError as exc:
            raise ImageError.from_os_error(ErrorKind.WRITE_PIXELS_FAILED, exc) from exc
        clear_error()
        logger.debug("Saved %s through Pillow (%dx%d)", path, image.width, image.height)

from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Set

from ..raster import GrayImage
from .base import ImageCodec
from .pgm import PgmCodec, encode_pgm, load_pgm, parse_pgm, save_pgm
from .pillow import PillowCodec, from_pil, to_pil

logger = logging.getLogger(__name__)


class ImageLoader:
    def __init__(self, codecs: Optional[Dict[str, ImageCodec]] = None) -> None:
        if codecs is None:
            codecs = {}
            for codec in (PgmCodec(), PillowCodec()):
                for ext in codec.extensions:
                    codecs[ext] = codec
        self._codecs = codecs

    @property
    def supported_extensions(self) -> Set[str]:
        return set(self._codecs.keys())

    def codec_for(self, path: str) -> ImageCodec:
        ext = os.path.splitext(path)[1].lower()
        codec = self._codecs.get(ext)
        if not codec:
            raise ValueError(f"Unsupported file extension: {ext}")
        return codec

    def load(self, path: str) -> GrayImage:
        codec = self.codec_for(path)
        logger.debug("Loading %s with %s", path, type(codec).__name__)
        return codec.load(path)

    def save(self, image: GrayImage, path: str) -> None:
        codec = self.codec_for(path)
        logger.debug("Saving %s with %s", path, type(codec).__name__)
        codec.save(image, path)


def load_image(path: str) -> GrayImage:
    return ImageLoader().load(path)


def save_image(image: GrayImage, path: str) -> None:
    ImageLoader().save(image, path)


__all__ = [
    "ImageCodec",
    "ImageLoader",
    "PgmCodec",
    "PillowCodec",
    "encode_pgm",
    "from_pil",
    "load_image",
    "load_pgm",
    "parse_pgm",
    "save_image",
    "save_pgm",
    "to_pil",
]

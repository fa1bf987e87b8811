from __future__ import annotations

from typing import Tuple

from ..raster import GrayImage


class ImageCodec:
    extensions: Tuple[str, ...] = ()

    def load(self, path: str) -> GrayImage:
        raise NotImplementedError

    def save(self, image: GrayImage, path: str) -> None:
        raise NotImplementedError

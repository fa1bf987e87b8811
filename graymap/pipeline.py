from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .codec import ImageLoader
from .instrumentation import measure
from .ops import blend, blur, brighten, crop, locate_subimage, mirror, negative, paste, rotate, threshold
from .raster import GrayImage

logger = logging.getLogger(__name__)

StepResult = Tuple[GrayImage, str]


@dataclass(frozen=True)
class Step:
    name: str
    args: Tuple[Any, ...] = ()


@dataclass
class PipelineSettings:
    count_pixels: bool = False
    output_maxval: Optional[int] = None


@dataclass(frozen=True)
class StepReport:
    step: Step
    detail: str = ""
    pixmem: Optional[int] = None


@dataclass
class PipelineResult:
    image: GrayImage
    reports: List[StepReport] = field(default_factory=list)


class ImagePipeline:
    """Apply a sequence of named steps to an image.

    In-place steps mutate the image passed to ``run``; steps that build a
    new image replace it for the steps that follow.
    """

    def __init__(self, settings: Optional[PipelineSettings] = None, loader: Optional[ImageLoader] = None) -> None:
        self.settings = settings or PipelineSettings()
        self.loader = loader or ImageLoader()
        self._handlers: Dict[str, Callable[..., StepResult]] = {
            "negative": self._negative,
            "threshold": self._threshold,
            "brighten": self._brighten,
            "rotate": self._rotate,
            "mirror": self._mirror,
            "crop": self._crop,
            "blur": self._blur,
            "paste": self._paste,
            "blend": self._blend,
            "locate": self._locate,
            "stats": self._stats,
        }

    @property
    def step_names(self) -> List[str]:
        return sorted(self._handlers)

    def run(self, image: GrayImage, steps: Iterable[Step]) -> PipelineResult:
        reports: List[StepReport] = []
        for step in steps:
            handler = self._handlers.get(step.name)
            if handler is None:
                raise ValueError(f"Unknown step '{step.name}'")
            with measure() as measurement:
                image, detail = handler(image, *step.args)
            pixmem = measurement.pixmem if self.settings.count_pixels else None
            logger.info("Step %s%s done (%dx%d)", step.name, step.args or "", image.width, image.height)
            reports.append(StepReport(step, detail, pixmem))
        if self.settings.output_maxval is not None:
            image = self._with_maxval(image, self.settings.output_maxval)
        return PipelineResult(image, reports)

    def run_file(self, path: str, steps: Iterable[Step], output: Optional[str] = None) -> PipelineResult:
        self._validate_input_path(path)
        image = self.loader.load(path)
        result = self.run(image, steps)
        if output:
            self.loader.save(result.image, output)
            logger.info("Wrote %s", output)
        return result

    def _negative(self, image: GrayImage) -> StepResult:
        negative(image)
        return image, ""

    def _threshold(self, image: GrayImage, thr: int) -> StepResult:
        threshold(image, thr)
        return image, ""

    def _brighten(self, image: GrayImage, factor: float) -> StepResult:
        brighten(image, factor)
        return image, ""

    def _rotate(self, image: GrayImage) -> StepResult:
        return rotate(image), ""

    def _mirror(self, image: GrayImage) -> StepResult:
        return mirror(image), ""

    def _crop(self, image: GrayImage, x: int, y: int, w: int, h: int) -> StepResult:
        return crop(image, x, y, w, h), ""

    def _blur(self, image: GrayImage, dx: int, dy: int) -> StepResult:
        blur(image, dx, dy)
        return image, ""

    def _paste(self, image: GrayImage, path: str, x: int, y: int) -> StepResult:
        paste(image, x, y, self.loader.load(path))
        return image, ""

    def _blend(self, image: GrayImage, path: str, x: int, y: int, alpha: float) -> StepResult:
        blend(image, x, y, self.loader.load(path), alpha)
        return image, ""

    def _locate(self, image: GrayImage, path: str) -> StepResult:
        location = locate_subimage(image, self.loader.load(path))
        if location.found:
            return image, f"found at ({location.x}, {location.y})"
        return image, "not found"

    def _stats(self, image: GrayImage) -> StepResult:
        low, high = image.stats()
        return image, f"{image.width}x{image.height} maxval={image.maxval} min={low} max={high}"

    @staticmethod
    def _with_maxval(image: GrayImage, maxval: int) -> GrayImage:
        return GrayImage(image.width, image.height, maxval, bytearray(image.pixels))

    def _validate_input_path(self, path: str) -> None:
        ext = os.path.splitext(path)[1].lower()
        if ext not in self.loader.supported_extensions:
            raise ValueError("Supported formats: " + ", ".join(sorted(self.loader.supported_extensions)))
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")

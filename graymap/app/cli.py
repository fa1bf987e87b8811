from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional, Sequence

from ..pipeline import ImagePipeline, PipelineSettings, Step, StepReport
from ..raster import image_init

LOG_LEVEL_ENV_VAR = "GRAYMAP_LOG_LEVEL"


def _ints(value: str, count: int) -> List[int]:
    parts = value.split(",")
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"expected {count} comma-separated integers, got '{value}'")
    try:
        return [int(part) for part in parts]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer list '{value}'") from exc


def _split_anchor(value: str) -> List[str]:
    path, sep, coords = value.rpartition("@")
    if not sep or not path:
        raise argparse.ArgumentTypeError(f"expected PATH@COORDS, got '{value}'")
    return [path, coords]


def _threshold_step(value: str) -> Step:
    try:
        return Step("threshold", (int(value),))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid threshold '{value}'") from exc


def _brighten_step(value: str) -> Step:
    try:
        return Step("brighten", (float(value),))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid factor '{value}'") from exc


def _crop_step(value: str) -> Step:
    return Step("crop", tuple(_ints(value, 4)))


def _blur_step(value: str) -> Step:
    return Step("blur", tuple(_ints(value, 2)))


def _paste_step(value: str) -> Step:
    path, coords = _split_anchor(value)
    x, y = _ints(coords, 2)
    return Step("paste", (path, x, y))


def _blend_step(value: str) -> Step:
    path, coords = _split_anchor(value)
    parts = coords.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected PATH@X,Y,ALPHA, got '{value}'")
    x, y = _ints(",".join(parts[:2]), 2)
    try:
        alpha = float(parts[2])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid alpha '{parts[2]}'") from exc
    return Step("blend", (path, x, y, alpha))


def _locate_step(value: str) -> Step:
    return Step("locate", (value,))


def _add_step(parser: argparse.ArgumentParser, flag: str, metavar: str, parse: Callable[[str], Step], help_text: str) -> None:
    parser.add_argument(flag, dest="steps", action="append", type=parse, metavar=metavar, help=help_text)


def _add_flag_step(parser: argparse.ArgumentParser, flag: str, name: str, help_text: str) -> None:
    parser.add_argument(flag, dest="steps", action="append_const", const=Step(name), help=help_text)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="graymap: apply 8-bit grayscale image operations to a PGM (or Pillow-readable) file."
    )
    parser.add_argument("path", help="Input image (.pgm, .png, .jpg, .bmp, .gif, .tif)")
    parser.add_argument("-o", "--output", metavar="PATH", help="Write the result to PATH (format from extension)")
    parser.add_argument("--count", action="store_true", help="Report pixel memory accesses for every step")
    parser.add_argument("--maxval", type=int, choices=range(1, 256), metavar="N", help="Set maxval of the result (1-255)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    steps = parser.add_argument_group("steps", "Applied in command-line order")
    _add_flag_step(steps, "--negative", "negative", "Invert samples (255 - s)")
    _add_step(steps, "--threshold", "THR", _threshold_step, "Samples below THR become 0, others maxval")
    _add_step(steps, "--brighten", "F", _brighten_step, "Multiply samples by F, saturating at maxval")
    _add_flag_step(steps, "--rotate", "rotate", "Rotate 90 degrees counter-clockwise")
    _add_flag_step(steps, "--mirror", "mirror", "Flip left-right")
    _add_step(steps, "--crop", "X,Y,W,H", _crop_step, "Keep the W x H rectangle at (X, Y)")
    _add_step(steps, "--blur", "DX,DY", _blur_step, "Mean filter over a (2DX+1) x (2DY+1) window")
    _add_step(steps, "--paste", "PATH@X,Y", _paste_step, "Paste the image at PATH with its origin at (X, Y)")
    _add_step(steps, "--blend", "PATH@X,Y,ALPHA", _blend_step, "Blend the image at PATH at (X, Y)")
    _add_step(steps, "--locate", "PATH", _locate_step, "Report where the image at PATH first occurs")
    _add_flag_step(steps, "--stats", "stats", "Report size, maxval and min/max samples")
    parser.epilog = f"Set {LOG_LEVEL_ENV_VAR} (e.g. DEBUG) to choose the log level."
    return parser.parse_args(argv)


def _resolve_log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def _format_report(report: StepReport) -> Optional[str]:
    parts = []
    if report.detail:
        parts.append(report.detail)
    if report.pixmem is not None:
        parts.append(f"pixmem={report.pixmem}")
    if not parts:
        return None
    return f"{report.step.name}: " + " ".join(parts)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=_resolve_log_level(args.verbose), format="%(levelname)s %(name)s: %(message)s")
    image_init()
    settings = PipelineSettings(count_pixels=args.count, output_maxval=args.maxval)
    pipeline = ImagePipeline(settings)
    try:
        result = pipeline.run_file(args.path, args.steps or [], args.output)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 2
    for report in result.reports:
        line = _format_report(report)
        if line:
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

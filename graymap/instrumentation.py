"""Thread-local operation counters.

Pixel accessors and bulk raster transfers report how many samples they
touch under the ``pixmem`` counter. Counters live in thread-local storage
so tests and callers can read and reset them without interfering with
other threads.
"""
from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

PIXMEM = "pixmem"

_CALIBRATION_ROUNDS = 1000

_state = threading.local()
_calibration: Optional[float] = None
_calibration_lock = threading.Lock()


def _counters() -> Dict[str, int]:
    table = getattr(_state, "counters", None)
    if table is None:
        table = {}
        _state.counters = table
    return table


def register(name: str) -> None:
    _counters().setdefault(name, 0)


def count(name: str, n: int = 1) -> None:
    table = _counters()
    table[name] = table.get(name, 0) + n


def counter(name: str) -> int:
    return _counters().get(name, 0)


def counters() -> Dict[str, int]:
    return dict(_counters())


def reset(name: Optional[str] = None) -> None:
    table = _counters()
    if name is None:
        for key in table:
            table[key] = 0
    else:
        table[name] = 0


def calibrate() -> float:
    """Return the overhead in seconds of a single timer read.

    Measured once per process; later calls return the cached value.
    """
    global _calibration
    with _calibration_lock:
        if _calibration is None:
            start = time.perf_counter()
            for _ in range(_CALIBRATION_ROUNDS):
                time.perf_counter()
            _calibration = (time.perf_counter() - start) / _CALIBRATION_ROUNDS
        return _calibration


@dataclass
class Measurement:
    pixmem: int = 0
    elapsed: float = 0.0


@contextmanager
def measure() -> Iterator[Measurement]:
    """Measure the ``pixmem`` delta and wall time of the enclosed block."""
    result = Measurement()
    before = counter(PIXMEM)
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = max(0.0, time.perf_counter() - start - calibrate())
        result.pixmem = counter(PIXMEM) - before

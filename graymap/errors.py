from __future__ import annotations

import os
import threading
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    OPEN_FAILED = "Open failed"
    INVALID_FORMAT = "Invalid file format"
    INVALID_WIDTH = "Invalid width"
    INVALID_HEIGHT = "Invalid height"
    INVALID_MAXVAL = "Invalid maxval"
    WHITESPACE_EXPECTED = "Whitespace expected"
    SHORT_READ = "Reading pixels"
    ALLOC_FAILED = "Memory allocation for pixel array failed"
    WRITE_HEADER_FAILED = "Writing header failed"
    WRITE_PIXELS_FAILED = "Writing pixels failed"


class ImageError(Exception):
    """Resource or format failure raised by image constructors and the codecs.

    ``kind`` identifies the failing step, ``errno`` keeps the OS error code
    when the failure came from the operating system (``None`` otherwise).
    """

    def __init__(self, kind: ErrorKind, detail: str = "", errno: Optional[int] = None) -> None:
        self.kind = kind
        self.errno = errno
        self.detail = detail
        super().__init__(self.message)
        _last.cause = kind.value

    @property
    def cause(self) -> str:
        return self.kind.value

    @property
    def message(self) -> str:
        parts = [self.kind.value]
        if self.detail:
            parts.append(self.detail)
        elif self.errno:
            parts.append(os.strerror(self.errno))
        return ": ".join(parts)

    @classmethod
    def from_os_error(cls, kind: ErrorKind, exc: OSError) -> "ImageError":
        detail = exc.strerror or str(exc)
        return cls(kind, detail, errno=exc.errno)


_last = threading.local()


def error_message() -> str:
    """Return the cause of the last failure in this thread ("" if none)."""
    return getattr(_last, "cause", "")


def clear_error() -> None:
    _last.cause = ""

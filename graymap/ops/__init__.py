from .blur import blur
from .compose import NOT_FOUND, Location, blend, locate_subimage, match_subimage, paste
from .geometry import crop, mirror, rotate
from .point import brighten, negative, threshold

__all__ = [
    "blend",
    "blur",
    "brighten",
    "crop",
    "Location",
    "locate_subimage",
    "match_subimage",
    "mirror",
    "negative",
    "NOT_FOUND",
    "paste",
    "rotate",
    "threshold",
]

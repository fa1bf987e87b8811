from .codec import (
    ImageLoader,
    encode_pgm,
    from_pil,
    load_image,
    load_pgm,
    parse_pgm,
    save_image,
    save_pgm,
    to_pil,
)
from .errors import ErrorKind, ImageError, error_message
from .ops import (
    blend,
    blur,
    brighten,
    crop,
    locate_subimage,
    match_subimage,
    mirror,
    negative,
    paste,
    rotate,
    threshold,
)
from .raster import MAXVAL, GrayImage, create, destroy, image_init

__version__ = "0.1.0"

__all__ = [
    "blend",
    "blur",
    "brighten",
    "create",
    "crop",
    "destroy",
    "encode_pgm",
    "error_message",
    "ErrorKind",
    "from_pil",
    "GrayImage",
    "image_init",
    "ImageError",
    "ImageLoader",
    "load_image",
    "load_pgm",
    "locate_subimage",
    "match_subimage",
    "MAXVAL",
    "mirror",
    "negative",
    "parse_pgm",
    "paste",
    "rotate",
    "save_image",
    "save_pgm",
    "threshold",
    "to_pil",
]

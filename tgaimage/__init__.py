"""Read and write Truevision TGA images."""

from .errors import (
    CorruptStreamError,
    InvalidExtensionAreaError,
    MalformedHeaderError,
    OutOfBoundsError,
    TGAError,
    TGAIOError,
    TruncatedDataError,
    UnsupportedFormatError,
)
from .extension import DEFAULT_AUTHOR, ExtensionArea
from .footer import SIGNATURE, Footer
from .header import ColorMapSpec, Header, ImageSpec
from .image import Color, TGAImage, create_blank, load, loads, save

__all__ = [
    "Color",
    "ColorMapSpec",
    "CorruptStreamError",
    "DEFAULT_AUTHOR",
    "ExtensionArea",
    "Footer",
    "Header",
    "ImageSpec",
    "InvalidExtensionAreaError",
    "MalformedHeaderError",
    "OutOfBoundsError",
    "SIGNATURE",
    "TGAError",
    "TGAIOError",
    "TGAImage",
    "TruncatedDataError",
    "UnsupportedFormatError",
    "create_blank",
    "load",
    "loads",
    "save",
]

__version__ = "0.1.0"

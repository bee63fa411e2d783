"""The fixed 18-byte TGA header.

Layout (little-endian):

  0  id_length          u8
  1  color_map_type     u8   0 = none, 1 = present
  2  image_type         u8   see IMAGE_TYPES
  3  first_entry_index  u16  color map specification
  5  length             u16
  7  bits_per_pixel     u8
  8  x_origin           u16  image specification
 10  y_origin           u16
 12  width              u16
 14  height             u16
 16  bits_per_pixel     u8
 17  descriptor         u8   bits 0-3 alpha depth, 4-5 origin, 6-7 reserved
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from .cursor import ByteCursor
from .errors import MalformedHeaderError, UnsupportedFormatError

HEADER_FORMAT = "<BBBHHBHHHHBB"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
MAX_DIMENSION = 0xFFFF

NO_IMAGE_DATA = 0
COLOR_MAPPED = 1
TRUE_COLOR = 2
GRAYSCALE = 3
RLE_COLOR_MAPPED = 9
RLE_TRUE_COLOR = 10
RLE_GRAYSCALE = 11

IMAGE_TYPES = {
    NO_IMAGE_DATA: "no image data",
    COLOR_MAPPED: "uncompressed color-mapped",
    TRUE_COLOR: "uncompressed true-color",
    GRAYSCALE: "uncompressed grayscale",
    RLE_COLOR_MAPPED: "run-length encoded color-mapped",
    RLE_TRUE_COLOR: "run-length encoded true-color",
    RLE_GRAYSCALE: "run-length encoded grayscale",
}

RLE_FLAG = 0x08
ALPHA_DEPTH_MASK = 0x0F
RIGHT_ORIGIN = 0x10
TOP_ORIGIN = 0x20
ORIGIN_MASK = RIGHT_ORIGIN | TOP_ORIGIN


def bytes_per_entry(bits: int) -> int:
    return (bits + 7) // 8


@dataclass
class ColorMapSpec:
    first_entry_index: int = 0
    length: int = 0
    bits_per_pixel: int = 0

    def is_zero(self) -> bool:
        return self.first_entry_index == 0 and self.length == 0 and self.bits_per_pixel == 0


@dataclass
class ImageSpec:
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    bits_per_pixel: int = 0
    descriptor: int = 0


@dataclass
class Header:
    id_length: int = 0
    color_map_type: int = 0
    image_type: int = NO_IMAGE_DATA
    color_map_spec: ColorMapSpec = field(default_factory=ColorMapSpec)
    image_spec: ImageSpec = field(default_factory=ImageSpec)

    @property
    def is_image_present(self) -> bool:
        return self.image_type != NO_IMAGE_DATA

    @property
    def is_rle_compressed(self) -> bool:
        return self.image_type in (RLE_COLOR_MAPPED, RLE_TRUE_COLOR, RLE_GRAYSCALE)

    @property
    def is_true_color(self) -> bool:
        return self.image_type in (TRUE_COLOR, RLE_TRUE_COLOR)

    @property
    def is_grayscale(self) -> bool:
        return self.image_type in (GRAYSCALE, RLE_GRAYSCALE)

    @property
    def is_color_mapped(self) -> bool:
        return self.image_type in (COLOR_MAPPED, RLE_COLOR_MAPPED)

    @property
    def has_color_map(self) -> bool:
        return self.color_map_type == 1

    @property
    def bytes_per_pixel(self) -> int:
        return bytes_per_entry(self.image_spec.bits_per_pixel)

    @property
    def color_map_entry_size(self) -> int:
        return bytes_per_entry(self.color_map_spec.bits_per_pixel)

    @property
    def color_map_size(self) -> int:
        if not self.has_color_map:
            return 0
        return self.color_map_spec.length * self.color_map_entry_size

    @property
    def alpha_depth(self) -> int:
        return self.image_spec.descriptor & ALPHA_DEPTH_MASK

    @property
    def is_top_origin(self) -> bool:
        return bool(self.image_spec.descriptor & TOP_ORIGIN)

    @property
    def is_right_origin(self) -> bool:
        return bool(self.image_spec.descriptor & RIGHT_ORIGIN)

    def describe_type(self) -> str:
        return IMAGE_TYPES.get(self.image_type, f"unknown ({self.image_type})")


def validate_header(header: Header, path: Optional[str] = None) -> None:
    cms = header.color_map_spec
    spec = header.image_spec
    if header.color_map_type not in (0, 1):
        raise MalformedHeaderError(f"invalid color map type {header.color_map_type}", path)
    if header.image_type not in IMAGE_TYPES:
        raise MalformedHeaderError(f"unknown image type {header.image_type}", path)
    if header.color_map_type == 0 and not cms.is_zero():
        raise MalformedHeaderError("color map specification set but no color map present", path)
    if header.is_color_mapped and (not header.has_color_map or cms.length == 0):
        raise MalformedHeaderError("color-mapped image without a color map", path)
    if header.has_color_map and cms.length and cms.bits_per_pixel == 0:
        raise MalformedHeaderError("color map entries have zero bits", path)
    if spec.width <= 0 or spec.height <= 0:
        raise MalformedHeaderError(f"invalid image size {spec.width}x{spec.height}", path)
    if spec.width > MAX_DIMENSION or spec.height > MAX_DIMENSION:
        raise MalformedHeaderError(
            f"image size {spec.width}x{spec.height} exceeds {MAX_DIMENSION} pixels per side", path
        )
    if spec.bits_per_pixel == 0:
        raise MalformedHeaderError("image has zero bits per pixel", path)


def read_header(cursor: ByteCursor) -> Header:
    (
        id_length,
        color_map_type,
        image_type,
        first_entry_index,
        cm_length,
        cm_bits,
        x_origin,
        y_origin,
        width,
        height,
        bits_per_pixel,
        descriptor,
    ) = cursor.unpack(HEADER_FORMAT, "TGA header")

    header = Header(
        id_length=id_length,
        color_map_type=color_map_type,
        image_type=image_type,
        color_map_spec=ColorMapSpec(first_entry_index, cm_length, cm_bits),
        image_spec=ImageSpec(x_origin, y_origin, width, height, bits_per_pixel, descriptor),
    )
    validate_header(header, cursor.path)
    return header


def ensure_supported(header: Header, path: Optional[str] = None) -> None:
    """Reject images whose pixels this codec cannot hold as true-color data."""
    if not header.is_image_present:
        raise UnsupportedFormatError("file contains no image data", path)
    if header.is_color_mapped:
        raise UnsupportedFormatError("color-mapped images are not supported", path)
    if header.is_grayscale:
        raise UnsupportedFormatError("grayscale images are not supported", path)


def serialize_header(header: Header) -> bytes:
    cms = header.color_map_spec
    spec = header.image_spec
    return struct.pack(
        HEADER_FORMAT,
        header.id_length,
        header.color_map_type,
        header.image_type,
        cms.first_entry_index,
        cms.length,
        cms.bits_per_pixel,
        spec.x_origin,
        spec.y_origin,
        spec.width,
        spec.height,
        spec.bits_per_pixel,
        spec.descriptor,
    )

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

from PIL import Image

from .cursor import ByteCursor
from .errors import OutOfBoundsError, TGAIOError, UnsupportedFormatError
from .extension import (
    DEFAULT_AUTHOR,
    STRAIGHT_ALPHA,
    ExtensionArea,
    read_extension_area,
    serialize_extension_area,
)
from .footer import FOOTER_SIZE, SIGNATURE, Footer, read_footer, serialize_footer
from .header import (
    HEADER_SIZE,
    ORIGIN_MASK,
    RLE_FLAG,
    TRUE_COLOR,
    ColorMapSpec,
    Header,
    ImageSpec,
    ensure_supported,
    read_header,
    serialize_header,
    validate_header,
)
from .orientation import normalize_orientation
from .pixels import expected_length, read_pixel_data

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Pillow mode and raw decoder mode per pixel size
PIL_MODES = {
    3: ("RGB", "BGR"),
    4: ("RGBA", "BGRA"),
}


class Color(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255

    def to_bytes(self, pixel_size: int = 4) -> bytes:
        """Encode in on-disk channel order (blue first)."""
        if pixel_size == 4:
            return bytes((self.b, self.g, self.r, self.a))
        if pixel_size == 3:
            return bytes((self.b, self.g, self.r))
        raise UnsupportedFormatError(f"cannot encode a color into {pixel_size}-byte pixels")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Color":
        if len(raw) == 4:
            return cls(raw[2], raw[1], raw[0], raw[3])
        if len(raw) == 3:
            return cls(raw[2], raw[1], raw[0])
        raise UnsupportedFormatError(f"cannot decode a color from {len(raw)}-byte pixels")


class TGAImage:
    """A true-color TGA image held uncompressed with a bottom-left origin.

    ``pixels`` is row-major, row 0 being the bottom scanline. ``image_id``
    and ``color_map`` are carried through unchanged.
    """

    def __init__(
        self,
        header: Header,
        pixels: Union[bytes, bytearray],
        image_id: bytes = b"",
        color_map: bytes = b"",
        footer: Optional[Footer] = None,
        extension: Optional[ExtensionArea] = None,
    ):
        self.header = header
        self.pixels = bytearray(pixels)
        self.image_id = bytes(image_id)
        self.color_map = bytes(color_map)
        self.footer = footer if footer is not None else Footer()
        self.extension = extension

    @classmethod
    def load(cls, path: PathLike) -> "TGAImage":
        return cls._decode(ByteCursor.from_path(path))

    @classmethod
    def from_bytes(cls, data: bytes) -> "TGAImage":
        return cls._decode(ByteCursor(data))

    @classmethod
    def _decode(cls, cursor: ByteCursor) -> "TGAImage":
        header = read_header(cursor)
        ensure_supported(header, cursor.path)

        image_id = cursor.read(header.id_length, "image id")
        color_map = cursor.read(header.color_map_size, "color map")
        pixels = read_pixel_data(cursor, header)
        header.image_type &= ~RLE_FLAG
        normalize_orientation(header, pixels)

        footer = None
        extension = None
        if len(cursor) >= HEADER_SIZE + FOOTER_SIZE:
            footer = read_footer(cursor)
        if footer is None or not footer.is_new_format:
            logger.debug("no v2.0 footer in %s", cursor.path or "buffer")
            footer = Footer()
        elif footer.ext_area_offset:
            extension = read_extension_area(cursor, footer.ext_area_offset)

        return cls(header, pixels, image_id, color_map, footer, extension)

    @classmethod
    def blank(cls, width: int, height: int, pixel: Sequence[int]) -> "TGAImage":
        header = Header(
            image_type=TRUE_COLOR,
            color_map_spec=ColorMapSpec(),
            image_spec=ImageSpec(width=width, height=height, bits_per_pixel=32, descriptor=8),
        )
        validate_header(header)
        fill = Color(*pixel).to_bytes(4)
        pixels = bytearray()
        for _row in range(height):
            for _col in range(width):
                pixels += fill
        return cls(header, pixels, footer=Footer())

    @classmethod
    def from_pil(cls, img: Image.Image) -> "TGAImage":
        img = img.convert("RGBA")
        width, height = img.size
        data = img.tobytes("raw", "BGRA", 0, -1)
        header = Header(
            image_type=TRUE_COLOR,
            image_spec=ImageSpec(width=width, height=height, bits_per_pixel=32, descriptor=8),
        )
        validate_header(header)
        return cls(header, data)

    @property
    def width(self) -> int:
        return self.header.image_spec.width

    @property
    def height(self) -> int:
        return self.header.image_spec.height

    @property
    def bytes_per_pixel(self) -> int:
        return self.header.bytes_per_pixel

    @property
    def width_in_bytes(self) -> int:
        return self.width * self.bytes_per_pixel

    def _offset(self, row: int, col: int) -> int:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise OutOfBoundsError(
                f"pixel ({row}, {col}) outside {self.width}x{self.height} image"
            )
        return row * self.width_in_bytes + col * self.bytes_per_pixel

    def get_pixel(self, row: int, col: int) -> bytes:
        i = self._offset(row, col)
        return bytes(self.pixels[i : i + self.bytes_per_pixel])

    def get_color(self, row: int, col: int) -> Color:
        return Color.from_bytes(self.get_pixel(row, col))

    def set_pixel(self, row: int, col: int, pixel: Union[bytes, Color]) -> None:
        i = self._offset(row, col)
        if isinstance(pixel, Color):
            pixel = pixel.to_bytes(self.bytes_per_pixel)
        if len(pixel) != self.bytes_per_pixel:
            raise ValueError(f"pixel must be {self.bytes_per_pixel} bytes, got {len(pixel)}")
        self.pixels[i : i + self.bytes_per_pixel] = pixel

    def to_bytes(self, author: str = DEFAULT_AUTHOR, timestamp: Optional[datetime] = None) -> bytes:
        header = self.header
        assert len(self.pixels) == expected_length(header), "pixel buffer does not match geometry"
        assert len(self.image_id) == header.id_length, "image id does not match header"
        assert len(self.color_map) == header.color_map_size, "color map does not match header"

        header.image_type &= ~RLE_FLAG
        header.image_spec.descriptor &= ~ORIGIN_MASK & 0xFF

        if self.extension is None:
            self.extension = ExtensionArea()
            if header.alpha_depth:
                self.extension.attributes_type = STRAIGHT_ALPHA
        self.extension.refresh(author, timestamp)

        out = bytearray(serialize_header(header))
        out += self.image_id
        out += self.color_map
        out += self.pixels
        self.footer.ext_area_offset = len(out)
        self.footer.dev_dir_offset = 0
        self.footer.signature = SIGNATURE
        out += serialize_extension_area(self.extension)
        out += serialize_footer(self.footer)
        return bytes(out)

    def save(self, path: PathLike, author: str = DEFAULT_AUTHOR,
             timestamp: Optional[datetime] = None) -> None:
        data = self.to_bytes(author, timestamp)
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise TGAIOError(f"cannot write file: {e.strerror or e}", str(path)) from e
        logger.debug("wrote %d bytes to %s", len(data), path)

    def to_pil(self) -> Image.Image:
        """Return a top-down Pillow image (RGB or RGBA)."""
        modes = PIL_MODES.get(self.bytes_per_pixel)
        if modes is None:
            raise UnsupportedFormatError(
                f"{self.header.image_spec.bits_per_pixel}-bit images cannot be converted"
            )
        mode, rawmode = modes
        return Image.frombytes(mode, (self.width, self.height), bytes(self.pixels), "raw", rawmode, 0, -1)

    def __repr__(self) -> str:
        return (
            f"TGAImage({self.width}x{self.height}, {self.header.image_spec.bits_per_pixel} bpp, "
            f"{self.header.describe_type()})"
        )


def load(path: PathLike) -> TGAImage:
    return TGAImage.load(path)


def loads(data: bytes) -> TGAImage:
    return TGAImage.from_bytes(data)


def create_blank(width: int, height: int, pixel: Sequence[int]) -> TGAImage:
    return TGAImage.blank(width, height, pixel)


def save(image: TGAImage, path: PathLike, author: str = DEFAULT_AUTHOR,
         timestamp: Optional[datetime] = None) -> None:
    image.save(path, author, timestamp)

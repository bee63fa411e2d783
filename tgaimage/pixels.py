"""Pixel data: raw copy or run-length decoding.

An RLE stream is a sequence of packets. Each starts with a control byte
whose low seven bits hold ``count - 1``:

  high bit set    run packet, one pixel follows and is repeated ``count`` times
  high bit clear  raw packet, ``count`` pixels follow verbatim

Packets may cross scanline boundaries but must not cross the end of the
image.
"""

from __future__ import annotations

import logging

from .cursor import ByteCursor
from .errors import CorruptStreamError
from .header import Header, bytes_per_entry

logger = logging.getLogger(__name__)

RUN_PACKET = 0x80
COUNT_MASK = 0x7F


def bytes_per_pixel(bits: int) -> int:
    return bytes_per_entry(bits)


def expected_length(header: Header) -> int:
    spec = header.image_spec
    return spec.width * spec.height * bytes_per_pixel(spec.bits_per_pixel)


def read_raw(cursor: ByteCursor, length: int) -> bytearray:
    return bytearray(cursor.read(length, "image data"))


def decode_rle(cursor: ByteCursor, pixel_size: int, length: int) -> bytearray:
    out = bytearray()
    packets = 0
    while len(out) < length:
        control = cursor.read_byte("RLE packet header")
        count = (control & COUNT_MASK) + 1
        size = count * pixel_size
        if len(out) + size > length:
            raise CorruptStreamError(
                f"RLE packet {packets} at 0x{cursor.tell() - 1:x} decodes {size} bytes, "
                f"only {length - len(out)} left in the image",
                cursor.path,
            )
        if control & RUN_PACKET:
            out += cursor.read(pixel_size, "RLE run packet") * count
        else:
            out += cursor.read(size, "RLE raw packet")
        packets += 1
    logger.debug("decoded %d RLE packets into %d bytes", packets, len(out))
    return out


def read_pixel_data(cursor: ByteCursor, header: Header) -> bytearray:
    length = expected_length(header)
    if header.is_rle_compressed:
        return decode_rle(cursor, header.bytes_per_pixel, length)
    return read_raw(cursor, length)

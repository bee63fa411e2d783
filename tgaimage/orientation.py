"""Bring pixel data to the canonical bottom-left origin.

Descriptor bit 5 marks a top origin, bit 4 a right origin. After
``normalize_orientation`` row 0 of the buffer is the bottom scanline,
column 0 the left-most column, and both bits are clear.
"""

from __future__ import annotations

import logging

from .header import ORIGIN_MASK, Header

logger = logging.getLogger(__name__)


def flip_vertical(data: bytearray, width: int, height: int, pixel_size: int) -> None:
    stride = width * pixel_size
    for y in range(height // 2):
        top = y * stride
        bottom = (height - 1 - y) * stride
        data[top : top + stride], data[bottom : bottom + stride] = (
            data[bottom : bottom + stride],
            data[top : top + stride],
        )


def flip_horizontal(data: bytearray, width: int, height: int, pixel_size: int) -> None:
    stride = width * pixel_size
    for x in range(width // 2):
        left = x * pixel_size
        right = (width - 1 - x) * pixel_size
        for y in range(height):
            row = y * stride
            a = row + left
            b = row + right
            data[a : a + pixel_size], data[b : b + pixel_size] = (
                data[b : b + pixel_size],
                data[a : a + pixel_size],
            )


def normalize_orientation(header: Header, data: bytearray) -> None:
    spec = header.image_spec
    pixel_size = header.bytes_per_pixel
    if header.is_top_origin:
        flip_vertical(data, spec.width, spec.height, pixel_size)
        logger.debug("flipped %dx%d image vertically", spec.width, spec.height)
    if header.is_right_origin:
        flip_horizontal(data, spec.width, spec.height, pixel_size)
        logger.debug("flipped %dx%d image horizontally", spec.width, spec.height)
    spec.descriptor &= ~ORIGIN_MASK & 0xFF

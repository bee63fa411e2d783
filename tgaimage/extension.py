"""The optional TGA 2.0 extension area.

The record is 495 bytes. Some writers store 494 in its length field, so
both values are accepted on read; 495 is always written. Text fields are
kept as the raw fixed-width bytes so that whatever follows the
terminating NUL is written back as it was read. The color correction
table, postage stamp and scan-line table the record points at are
reported but never read.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from .cursor import ByteCursor
from .errors import InvalidExtensionAreaError

logger = logging.getLogger(__name__)

EXTENSION_FORMAT = "<H41s324s6H41s3H41sH1sI2H2H3IB"
EXTENSION_SIZE = struct.calcsize(EXTENSION_FORMAT)
ACCEPTED_LENGTHS = (EXTENSION_SIZE - 1, EXTENSION_SIZE)

NAME_SIZE = 41
COMMENT_LINE_SIZE = 81
COMMENT_LINES = 4

DEFAULT_AUTHOR = "tgaimage"

# attributes_type values
NO_ALPHA = 0
STRAIGHT_ALPHA = 3


def _padded(text: str, size: int) -> bytes:
    raw = text.encode("ascii", errors="replace")[: size - 1]
    return raw + b"\x00" * (size - len(raw))


def _text(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


@dataclass
class ExtensionArea:
    length: int = EXTENSION_SIZE
    author_name: bytes = b"\x00" * NAME_SIZE
    author_comment: bytes = b"\x00" * (COMMENT_LINE_SIZE * COMMENT_LINES)
    date_time: Tuple[int, int, int, int, int, int] = (0, 0, 0, 0, 0, 0)
    job_name: bytes = b"\x00" * NAME_SIZE
    job_time: Tuple[int, int, int] = (0, 0, 0)
    software_id: bytes = b"\x00" * NAME_SIZE
    software_version: int = 0
    software_letter: bytes = b" "
    key_color: int = 0
    pixel_aspect_ratio: Tuple[int, int] = (0, 0)
    gamma_value: Tuple[int, int] = (0, 0)
    color_correction_offset: int = 0
    postage_stamp_offset: int = 0
    scan_line_tbl_offset: int = 0
    attributes_type: int = NO_ALPHA

    @property
    def comments(self) -> List[str]:
        return [
            _text(self.author_comment[i * COMMENT_LINE_SIZE : (i + 1) * COMMENT_LINE_SIZE])
            for i in range(COMMENT_LINES)
        ]

    @property
    def author(self) -> str:
        return _text(self.author_name)

    @property
    def job(self) -> str:
        return _text(self.job_name)

    @property
    def software(self) -> str:
        return _text(self.software_id)

    @property
    def timestamp(self) -> Optional[datetime]:
        month, day, year, hour, minute, second = self.date_time
        if not year:
            return None
        try:
            return datetime(year, month, day, hour, minute, second)
        except ValueError:
            return None

    def refresh(self, author: str = DEFAULT_AUTHOR, timestamp: Optional[datetime] = None) -> None:
        """Prepare the record for writing: fix the size field and set the author."""
        self.length = EXTENSION_SIZE
        self.author_name = _padded(author, NAME_SIZE)
        if timestamp is not None:
            self.date_time = (
                timestamp.month,
                timestamp.day,
                timestamp.year,
                timestamp.hour,
                timestamp.minute,
                timestamp.second,
            )


def read_extension_area(cursor: ByteCursor, offset: int) -> ExtensionArea:
    cursor.seek(offset)
    values = cursor.unpack(EXTENSION_FORMAT, "extension area")
    length = values[0]
    if length not in ACCEPTED_LENGTHS:
        raise InvalidExtensionAreaError(
            f"extension area size is {length}, expected {EXTENSION_SIZE}", cursor.path
        )

    ext = ExtensionArea(
        length=length,
        author_name=values[1],
        author_comment=values[2],
        date_time=tuple(values[3:9]),
        job_name=values[9],
        job_time=tuple(values[10:13]),
        software_id=values[13],
        software_version=values[14],
        software_letter=values[15],
        key_color=values[16],
        pixel_aspect_ratio=tuple(values[17:19]),
        gamma_value=tuple(values[19:21]),
        color_correction_offset=values[21],
        postage_stamp_offset=values[22],
        scan_line_tbl_offset=values[23],
        attributes_type=values[24],
    )

    if ext.color_correction_offset:
        logger.warning("color correction table at 0x%x, not parsed", ext.color_correction_offset)
    if ext.postage_stamp_offset:
        logger.warning("postage stamp at 0x%x, not parsed", ext.postage_stamp_offset)
    if ext.scan_line_tbl_offset:
        logger.warning("scan line table at 0x%x, not parsed", ext.scan_line_tbl_offset)
    return ext


def serialize_extension_area(ext: ExtensionArea) -> bytes:
    return struct.pack(
        EXTENSION_FORMAT,
        ext.length,
        ext.author_name,
        ext.author_comment,
        *ext.date_time,
        ext.job_name,
        *ext.job_time,
        ext.software_id,
        ext.software_version,
        ext.software_letter,
        ext.key_color,
        *ext.pixel_aspect_ratio,
        *ext.gamma_value,
        ext.color_correction_offset,
        ext.postage_stamp_offset,
        ext.scan_line_tbl_offset,
        ext.attributes_type,
    )

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from .cursor import ByteCursor
from .errors import TGAIOError

logger = logging.getLogger(__name__)

SIGNATURE = b"TRUEVISION-XFILE.\x00"
FOOTER_FORMAT = "<II18s"
FOOTER_SIZE = struct.calcsize(FOOTER_FORMAT)


@dataclass
class Footer:
    ext_area_offset: int = 0
    dev_dir_offset: int = 0
    signature: bytes = SIGNATURE

    @property
    def is_new_format(self) -> bool:
        return self.signature == SIGNATURE


def read_footer(cursor: ByteCursor) -> Footer:
    """Read the last 26 bytes of the file as a v2.0 footer.

    The result is only meaningful when ``is_new_format`` is true; in a
    v1.0 file these bytes are the tail of the image data.
    """
    if len(cursor) < FOOTER_SIZE:
        raise TGAIOError(f"file too short for a footer ({len(cursor)} bytes)", cursor.path)
    cursor.seek(len(cursor) - FOOTER_SIZE)
    ext_area_offset, dev_dir_offset, signature = cursor.unpack(FOOTER_FORMAT, "TGA footer")
    footer = Footer(ext_area_offset, dev_dir_offset, signature)
    if footer.is_new_format and footer.dev_dir_offset:
        logger.warning("developer directory present at 0x%x, not parsed", footer.dev_dir_offset)
    return footer


def serialize_footer(footer: Footer) -> bytes:
    # developer areas are never written back
    return struct.pack(FOOTER_FORMAT, footer.ext_area_offset, 0, footer.signature)

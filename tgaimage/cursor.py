from __future__ import annotations

import struct
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from .errors import TGAIOError, TruncatedDataError


class ByteCursor:
    """Bounded reader over a whole file held in memory."""

    def __init__(self, data: bytes, path: Optional[str] = None):
        self.data = bytes(data)
        self.path = path
        self.pos = 0

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ByteCursor":
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise TGAIOError(f"cannot read file: {e.strerror or e}", str(path)) from e
        return cls(data, str(path))

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def tell(self) -> int:
        return self.pos

    def seek(self, pos: int) -> None:
        if pos < 0 or pos > len(self.data):
            raise TruncatedDataError(f"offset 0x{pos:x} lies outside the file", self.path,
                                     expected=pos, actual=len(self.data))
        self.pos = pos

    def read(self, n: int, what: str = "data") -> bytes:
        if n > self.remaining:
            raise TruncatedDataError(f"truncated {what}", self.path, expected=n, actual=self.remaining)
        chunk = self.data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    def read_byte(self, what: str = "data") -> int:
        return self.read(1, what)[0]

    def unpack(self, fmt: str, what: str) -> Tuple[Any, ...]:
        return struct.unpack(fmt, self.read(struct.calcsize(fmt), what))

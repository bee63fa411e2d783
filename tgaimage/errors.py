"""Exceptions raised by the TGA codec.

Every failure while loading or saving an image is reported with one of
these; nothing is returned half-built.
"""

from __future__ import annotations

from typing import Optional


class TGAError(Exception):
    """Base class for all TGA errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.path:
            return f"{self.message} [file: {self.path}]"
        return self.message


class TGAIOError(TGAError):
    """Opening, reading or writing the underlying file failed."""


class MalformedHeaderError(TGAError):
    """The 18-byte header violates a structural invariant."""


class UnsupportedFormatError(TGAError):
    """The image is valid TGA but of a kind this codec does not decode."""


class TruncatedDataError(TGAError):
    """Fewer bytes are available than a field declares."""

    def __init__(self, message: str, path: Optional[str] = None,
                 expected: Optional[int] = None, actual: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message, path)

    def _format_message(self) -> str:
        base = super()._format_message()
        if self.expected is not None and self.actual is not None:
            return f"{base} [expected: {self.expected}, actual: {self.actual}]"
        return base


class CorruptStreamError(TGAError):
    """An RLE packet would decode past the end of the pixel buffer."""


class InvalidExtensionAreaError(TGAError):
    """The extension area size field does not match the record size."""


class OutOfBoundsError(TGAError, IndexError):
    """A pixel accessor was given a row or column outside the image."""

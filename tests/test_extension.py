import logging
import struct
from datetime import datetime

import pytest

from tgaimage.cursor import ByteCursor
from tgaimage.errors import InvalidExtensionAreaError, TruncatedDataError
from tgaimage.extension import (
    DEFAULT_AUTHOR,
    EXTENSION_SIZE,
    ExtensionArea,
    read_extension_area,
    serialize_extension_area,
)


def sample_area(**overrides):
    fields = dict(
        author_name=b"Ada".ljust(41, b"\x00"),
        author_comment=b"".join(line.ljust(81, b"\x00") for line in (b"first", b"", b"third", b"")),
        date_time=(3, 14, 2021, 15, 9, 26),
        job_name=b"job".ljust(41, b"\x00"),
        job_time=(1, 2, 3),
        software_id=b"paint".ljust(41, b"\x00"),
        software_version=410,
        software_letter=b"b",
        key_color=0xFF102030,
        pixel_aspect_ratio=(1, 1),
        gamma_value=(22, 10),
        attributes_type=3,
    )
    fields.update(overrides)
    return ExtensionArea(**fields)


def test_record_size():
    assert EXTENSION_SIZE == 495
    assert len(serialize_extension_area(ExtensionArea())) == EXTENSION_SIZE


def test_read_at_offset():
    area = sample_area()
    data = b"\x00" * 7 + serialize_extension_area(area) + b"\x00" * 26
    ext = read_extension_area(ByteCursor(data), 7)
    assert ext == area
    assert ext.author == "Ada"
    assert ext.comments == ["first", "", "third", ""]
    assert ext.job == "job"
    assert ext.software == "paint"
    assert ext.timestamp == datetime(2021, 3, 14, 15, 9, 26)


def test_layout_of_leading_fields():
    data = serialize_extension_area(sample_area())
    assert struct.unpack_from("<H", data, 0)[0] == EXTENSION_SIZE
    assert data[2:5] == b"Ada"
    assert data[43:48] == b"first"
    assert struct.unpack_from("<6H", data, 367) == (3, 14, 2021, 15, 9, 26)
    assert data[-1] == 3


@pytest.mark.parametrize("length", [494, 495])
def test_accepted_length_fields(length):
    data = bytearray(serialize_extension_area(sample_area()))
    struct.pack_into("<H", data, 0, length)
    ext = read_extension_area(ByteCursor(bytes(data)), 0)
    assert ext.length == length
    assert ext.author == "Ada"
    assert ext.attributes_type == 3

    ext.refresh()
    assert struct.unpack_from("<H", serialize_extension_area(ext), 0)[0] == EXTENSION_SIZE


@pytest.mark.parametrize("length", [0, 493, 496])
def test_wrong_length_is_invalid(length):
    data = bytearray(serialize_extension_area(ExtensionArea()))
    struct.pack_into("<H", data, 0, length)
    with pytest.raises(InvalidExtensionAreaError):
        read_extension_area(ByteCursor(bytes(data)), 0)


def test_cut_short_record():
    data = serialize_extension_area(ExtensionArea())[:300]
    with pytest.raises(TruncatedDataError):
        read_extension_area(ByteCursor(data), 0)


def test_sub_table_offsets_warn(caplog):
    area = sample_area(color_correction_offset=10, postage_stamp_offset=20, scan_line_tbl_offset=30)
    with caplog.at_level(logging.WARNING):
        read_extension_area(ByteCursor(serialize_extension_area(area)), 0)
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 3
    assert any("color correction" in m for m in messages)
    assert any("postage stamp" in m for m in messages)
    assert any("scan line" in m for m in messages)


def test_refresh_sets_author_and_keeps_the_rest():
    area = sample_area(length=12)
    area.refresh("someone else")
    assert area.length == EXTENSION_SIZE
    assert area.author == "someone else"
    assert len(area.author_name) == 41
    assert area.comments[0] == "first"
    assert area.date_time == (3, 14, 2021, 15, 9, 26)
    assert area.key_color == 0xFF102030


def test_refresh_truncates_long_author():
    area = ExtensionArea()
    area.refresh("x" * 100)
    assert area.author == "x" * 40
    assert area.author_name[-1] == 0


def test_refresh_stamps_date():
    area = ExtensionArea()
    area.refresh(timestamp=datetime(2026, 10, 18, 8, 30, 5))
    assert area.author == DEFAULT_AUTHOR
    assert area.date_time == (10, 18, 2026, 8, 30, 5)


def test_zeroed_area_has_no_timestamp():
    assert ExtensionArea().timestamp is None

"""Value parsing tests for the BSDF reader."""

import io
import struct

import numpy as np
import pytest

from bsdfreader import (
    BsdfReader,
    Eof,
    InvalidHeader,
    InvalidUtf8,
    Item,
    MissingData,
    load,
    loads,
)

HEADER = b"BSDF\x02\x02"

# Vectors below were produced by the reference Python BSDF encoder.

LOREM_DATA = b"BSDF\x02\x02s\xfd\xc9\x02\x00\x00\x00\x00\x00\x00\nLorem ipsum dolor sit amet, consectetur adipiscing elit. Duis id ante velit. Aenean euismod, ipsum a varius finibus, eros erat tincidunt ligula, non malesuada ex ipsum et tellus. Cras id convallis mauris, mattis porttitor nulla. In urna orci, faucibus ut consequat eleifend, vulputate ac elit. Integer gravida porta arcu, id volutpat libero lobortis at. Aenean bibendum eleifend auctor. Sed lectus purus, aliquet non purus ut, feugiat tristique leo. Praesent ut leo blandit, vulputate ex sit amet, venenatis libero. Curabitur vehicula ut enim sed posuere. Aliquam nec elit fringilla, aliquet lectus sed, suscipit quam. Vivamus malesuada ligula eu luctus finibus. Proin euismod sem sit amet eros euismod rhoncus.\n"

NORMAL_MAP = b"BSDF\x02\x02m\x03\x04testh\x01\x00\x05test1h\x02\x00\x05test3h\x04\x00"

NESTED_MAP = (
    b"BSDF\x02\x02m\x02\x04testh\x01\x00\x06nestedm\x03\x06nestedy\x04listl"
    b"\x03h\xff\xffni\x15\xcd[\x07\x00\x00\x00\x00\x04datas\tsome text"
)


# ── Header ──────────────────────────────────────────────────────────────────


def test_empty_stream_is_missing_data():
    with pytest.raises(MissingData):
        loads(b"")


def test_short_header_is_missing_data():
    with pytest.raises(MissingData):
        loads(b"BSDF\x02")


def test_bad_magic():
    with pytest.raises(InvalidHeader, match="bad magic"):
        loads(b"NOPE\x02\x02v")


def test_version():
    r = BsdfReader(b"BSDF\x04\x02")
    assert r.version is None
    assert r.parse() is None
    assert r.version == 516


def test_any_version_accepted():
    r = BsdfReader(b"BSDF\xff\xffv")
    assert r.parse() == Item.void()
    assert r.version == 0xFFFF


def test_header_read_once():
    with BsdfReader(HEADER + b"yn") as r:
        assert r.parse() == Item.boolean(True)
        assert r.parse() == Item.boolean(False)
        assert r.parse() is None
        assert r.parse() is None


# ── Scalars ─────────────────────────────────────────────────────────────────


def test_void_and_bools():
    assert loads(HEADER + b"v") == Item.void()
    assert loads(HEADER + b"y") == Item.boolean(True)
    assert loads(HEADER + b"n") == Item.boolean(False)


def test_float64():
    item = loads(b"BSDF\x02\x02do\x12\x83\xc0\xca!\t@")
    assert item == Item.f64(3.1415)


def test_float32():
    raw = np.array([1.1], dtype="<f4").tobytes()
    item = loads(HEADER + b"f" + raw)
    assert item.as_f32() == float(np.float32(1.1))


def test_int16_little_endian():
    assert loads(HEADER + b"h\x01\x00") == Item.int16(1)
    assert loads(HEADER + b"h\xff\xff") == Item.int16(-1)
    assert loads(HEADER + b"h\x00\x80") == Item.int16(-32768)


def test_int64():
    data = HEADER + b"i" + struct.pack("<q", -(2**63))
    assert loads(data) == Item.int64(-(2**63))
    assert loads(HEADER + b"i\x15\xcd[\x07\x00\x00\x00\x00") == Item.int64(123456789)


@pytest.mark.parametrize("tail", [b"h\x01", b"i\x00\x00\x00", b"f\x00", b"d" + b"\x00" * 7])
def test_truncated_scalar_is_eof(tail):
    with pytest.raises(Eof):
        loads(HEADER + tail)


# ── Strings ─────────────────────────────────────────────────────────────────


def test_long_string_with_extended_size():
    item = loads(LOREM_DATA)
    text = item.as_string()
    assert text is not None
    assert len(text) == 713
    assert text.startswith("\nLorem ipsum dolor sit amet")
    assert text.endswith("eros euismod rhoncus.\n")


def test_unicode_string():
    encoded = "héllo ✓".encode("utf-8")
    item = loads(HEADER + b"s" + bytes([len(encoded)]) + encoded)
    assert item == Item.string("héllo ✓")


def test_invalid_utf8():
    with pytest.raises(InvalidUtf8):
        loads(HEADER + b"s\x02\xc3\x28")


def test_truncated_string_is_eof():
    with pytest.raises(Eof):
        loads(HEADER + b"s\x05abc")


# ── Containers ──────────────────────────────────────────────────────────────


def test_normal_map():
    expected = Item.mapping({
        "test": Item.int16(1),
        "test1": Item.int16(2),
        "test3": Item.int16(4),
    })
    assert loads(NORMAL_MAP) == expected


def test_map_last_write_wins():
    data = HEADER + b"m\x03\x04testh\x01\x00\x04testh\x02\x00\x05test3h\x04\x00"
    item = loads(data)
    assert item.as_map() == {"test": Item.int16(2), "test3": Item.int16(4)}


def test_nested_map():
    expected = Item.mapping({
        "test": Item.int16(1),
        "nested": Item.mapping({
            "nested": Item.boolean(True),
            "list": Item.sequence([
                Item.int16(-1),
                Item.boolean(False),
                Item.int64(123456789),
            ]),
            "data": Item.string("some text"),
        }),
    })
    assert loads(NESTED_MAP) == expected


def test_empty_containers():
    assert loads(HEADER + b"l\x00") == Item.sequence([])
    assert loads(HEADER + b"m\x00") == Item.mapping({})


def test_list_missing_element():
    with pytest.raises(MissingData):
        loads(HEADER + b"l\x03yn")


def test_map_missing_value():
    with pytest.raises(MissingData):
        loads(HEADER + b"m\x01\x03key")


def test_map_truncated_key_is_eof():
    with pytest.raises(Eof):
        loads(HEADER + b"m\x01")


# ── Unrecognized tags ───────────────────────────────────────────────────────


def test_unrecognized_tag_at_top_level_is_no_value():
    r = BsdfReader(HEADER + b"Z")
    assert r.parse() is None
    assert r.version == 514


def test_unrecognized_tag_in_list_is_missing_data():
    with pytest.raises(MissingData):
        loads(HEADER + b"l\x02yZ")


def test_unrecognized_tag_ends_iteration():
    with BsdfReader(HEADER + b"yvZy") as r:
        assert list(r) == [Item.boolean(True), Item.void()]


# ── Sources ─────────────────────────────────────────────────────────────────


def test_parse_from_stream():
    stream = io.BytesIO(NORMAL_MAP)
    item = load(stream)
    assert item.as_map()["test1"] == Item.int16(2)
    assert not stream.closed


def test_parse_from_path(tmp_path):
    path = tmp_path / "nested.bsdf"
    path.write_bytes(NESTED_MAP)
    item = load(str(path))
    assert item.as_map()["nested"].as_map()["data"] == Item.string("some text")


def test_iterate_values():
    data = HEADER + b"h\x01\x00" + b"s\x02hi" + b"l\x01v"
    with BsdfReader(data) as r:
        items = list(r)
    assert items == [
        Item.int16(1),
        Item.string("hi"),
        Item.sequence([Item.void()]),
    ]

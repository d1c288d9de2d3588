"""Size-field boundary tests (inline vs. extended encoding)."""

import struct

import pytest

from bsdfreader import Eof, InvalidSize, Item, loads

HEADER = b"BSDF\x02\x02"


def test_inline_250():
    text = b"x" * 250
    item = loads(HEADER + b"s\xfa" + text)
    assert item == Item.string("x" * 250)


def test_inline_zero():
    assert loads(HEADER + b"s\x00") == Item.string("")


def test_extended_size():
    text = b"y" * 300
    data = HEADER + b"s\xfd" + struct.pack("<Q", 300) + text
    assert loads(data) == Item.string("y" * 300)


def test_extended_size_may_encode_small_values():
    data = HEADER + b"l\xfd" + struct.pack("<Q", 2) + b"yn"
    assert loads(data) == Item.sequence([Item.boolean(True), Item.boolean(False)])


@pytest.mark.parametrize("size_byte", [251, 252, 254, 255])
def test_reserved_size_bytes(size_byte):
    for tag in (b"s", b"l", b"m"):
        with pytest.raises(InvalidSize):
            loads(HEADER + tag + bytes([size_byte]) + b"\x00" * 16)


def test_reserved_size_byte_in_blob_fields():
    with pytest.raises(InvalidSize):
        loads(HEADER + b"b\x04\xfb")


def test_truncated_extended_size_is_eof():
    with pytest.raises(Eof):
        loads(HEADER + b"s\xfd\x01\x00\x00")


def test_huge_declared_length_fails_cleanly():
    # Nothing follows the size; reading must stop at end of stream.
    data = HEADER + b"s\xfd" + struct.pack("<Q", 2**62)
    with pytest.raises(Eof):
        loads(data)

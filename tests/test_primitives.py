"""
Unit tests for primitive value types.

These tests validate each byte-order codec against known HEX encodings.
"""

import io
import sys

import pytest
from construct import StreamError

from structurs import (
    U8, U16, U32, U64, I8, I16, I32, I64, F32, F64, Bool,
)
from structurs.primitives import is_primitive


# ============================================================================
# Byte Order Codecs
# ============================================================================

@pytest.mark.parametrize("primitive, value, le_hex, be_hex", [
    (U8, 0xAB, "ab", "ab"),
    (U16, 300, "2c01", "012c"),
    (U32, 0x01020304, "04030201", "01020304"),
    (U64, 1, "0100000000000000", "0000000000000001"),
    (I8, -1, "ff", "ff"),
    (I16, -2, "feff", "fffe"),
    (I32, -1, "ffffffff", "ffffffff"),
    (I64, 256, "0001000000000000", "0000000000000100"),
    (F32, 1.0, "0000803f", "3f800000"),
    (F64, 1.0, "000000000000f03f", "3ff0000000000000"),
    (Bool, True, "01", "01"),
])
def test_encode_little_and_big(primitive, value, le_hex, be_hex):
    """Validate little- and big-endian encodings."""
    le_stream = io.BytesIO()
    be_stream = io.BytesIO()

    primitive.encode_le(value, le_stream)
    primitive.encode_be(value, be_stream)

    assert le_stream.getvalue().hex() == le_hex
    assert be_stream.getvalue().hex() == be_hex


@pytest.mark.parametrize("primitive, data, expected", [
    (U16, "2c01", 300),
    (I32, "feffffff", -2),
    (F64, "000000000000f03f", 1.0),
    (Bool, "00", False),
])
def test_decode_little(primitive, data, expected):
    """Decode little-endian values."""
    assert primitive.decode_le(io.BytesIO(bytes.fromhex(data))) == expected


def test_decode_big():
    """Decode a big-endian value."""
    assert U32.decode_be(io.BytesIO(bytes.fromhex("01020304"))) == 0x01020304


def test_native_matches_platform_order():
    """Native order follows the interpreter's byte order."""
    stream = io.BytesIO()
    U16.encode_ne(300, stream)

    expected = (300).to_bytes(2, sys.byteorder)
    assert stream.getvalue() == expected
    assert U16.decode_ne(io.BytesIO(expected)) == 300


def test_decode_short_stream_raises_stream_error():
    """Reading past the end of the stream is a StreamError."""
    with pytest.raises(StreamError):
        U32.decode_le(io.BytesIO(b"\x01\x02"))


# ============================================================================
# Composite Contract, Size and Zero
# ============================================================================

def test_default_read_write_is_little_endian():
    """read/write without a byte order use little-endian encoding."""
    stream = io.BytesIO()
    U16.write(300, stream)

    assert stream.getvalue().hex() == "2c01"
    stream.seek(0)
    assert U16.read(stream) == 300


@pytest.mark.parametrize("primitive, size", [
    (U8, 1), (U16, 2), (U32, 4), (U64, 8),
    (I8, 1), (I16, 2), (I32, 4), (I64, 8),
    (F32, 4), (F64, 8), (Bool, 1),
])
def test_sizeof(primitive, size):
    """Each primitive reports its fixed width."""
    assert primitive.sizeof() == size


def test_zero_and_coercion():
    """Calling a primitive returns its zero value or coerces the argument."""
    assert U16() == 0
    assert F32() == 0.0
    assert Bool() is False
    assert U8(7) == 7
    assert F64(2) == 2.0


def test_is_primitive():
    """Only types with the full primitive codec contract are primitives."""
    assert is_primitive(U16)
    assert not is_primitive(int)

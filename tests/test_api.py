"""
Unit tests for the pack/unpack public API.
"""

import io
from typing import Annotated

import pytest
from construct import StreamError

import structurs
from structurs import (
    pack, unpack, read_record, write_record, record, FixedArray, U8, U16,
)


@record
class Message:
    code: Annotated[U16, "be"]
    reserved: Annotated[U8, "pad(bytes = 1)"]
    payload: FixedArray[U8, 2]


# ============================================================================
# pack / unpack
# ============================================================================

def test_pack():
    """Validate pack against the expected HEX output."""
    result = pack(Message(code=0x0102, reserved=7, payload=[3, 4]))

    assert result.hex() == "0102000304"


def test_unpack():
    """unpack builds a record instance from bytes."""
    message = unpack(Message, bytes.fromhex("0102ff0304"))

    assert isinstance(message, Message)
    assert message == Message(code=0x0102, reserved=0, payload=[3, 4])


def test_unpack_short_data():
    """Too few bytes raise StreamError."""
    with pytest.raises(StreamError):
        unpack(Message, b"\x01")


def test_pack_requires_record():
    """Plain objects cannot be packed."""
    with pytest.raises(TypeError, match="not a record"):
        pack(42)


def test_unpack_requires_readable_record():
    """Write-only records cannot be unpacked."""
    @record(readable=False)
    class Command:
        opcode: U8

    assert pack(Command(opcode=1)) == b"\x01"
    with pytest.raises(TypeError, match="not readable"):
        unpack(Command, b"\x01")


def test_pack_requires_writable_record():
    """Read-only records cannot be packed."""
    @record(writable=False)
    class Reply:
        status: U8

    with pytest.raises(TypeError, match="not writable"):
        pack(Reply(status=1))


# ============================================================================
# Streams
# ============================================================================

def test_stream_roundtrip():
    """write_record and read_record share a stream in order."""
    stream = io.BytesIO()
    first = Message(code=1, payload=[1, 1])
    second = Message(code=2, payload=[2, 2])

    write_record(first, stream)
    write_record(second, stream)
    stream.seek(0)

    assert read_record(Message, stream) == first
    assert read_record(Message, stream) == second


def test_version():
    """The package exposes its version."""
    assert structurs.__version__ == "0.1.0"


def test_public_names_are_importable():
    """Every name in __all__ resolves, and primitives have no alias twins."""
    for name in structurs.__all__:
        assert hasattr(structurs, name), name
    assert not [name for name in structurs.__all__ if name.endswith("Type")]

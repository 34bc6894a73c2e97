"""
Public API for reading and writing records.

Functions:
    pack: Serialize a record instance to bytes
    unpack: Deserialize bytes into a record instance
    read_record: Read a record instance from a binary stream
    write_record: Write a record instance to a binary stream
"""

from typing import Any, BinaryIO, Type, TypeVar

from .decorators import is_record

R = TypeVar("R")


def _require_direction(record_cls: type, direction: str) -> None:
    if not is_record(record_cls):
        raise TypeError(
            f"{record_cls.__name__} is not a record type; decorate it with @record"
        )
    if not getattr(record_cls, f"__record_{direction}__", False):
        raise TypeError(f"record {record_cls.__name__} is not {direction}")


def pack(obj: Any) -> bytes:
    """
    Serialize a record instance to bytes.

    Fields are written in declaration order; padding fields are written as
    zero bytes whatever their value.

    Args:
        obj: Instance of a ``@record`` class.

    Returns:
        bytes: The record's wire representation.

    Raises:
        TypeError: If ``obj`` is not a writable record instance.
        ConstructError: If a field value cannot be encoded, e.g. an array of
            the wrong length or an integer out of range.

    Examples:
        >>> pack(Header(a=300, b=[1, 2, 3, 4])).hex()
        '2c0100000001020304'
    """
    _require_direction(type(obj), "writable")
    return obj.to_bytes()


def unpack(record_cls: Type[R], data: bytes) -> R:
    """
    Deserialize bytes into a record instance.

    Raises:
        TypeError: If ``record_cls`` is not a readable record type.
        StreamError: If ``data`` is shorter than the record.
    """
    _require_direction(record_cls, "readable")
    return record_cls.from_bytes(data)


def read_record(record_cls: Type[R], stream: BinaryIO) -> R:
    """Read one record instance from a binary stream."""
    _require_direction(record_cls, "readable")
    return record_cls.read(stream)


def write_record(obj: Any, stream: BinaryIO) -> None:
    """Write one record instance to a binary stream."""
    _require_direction(type(obj), "writable")
    obj.write(stream)

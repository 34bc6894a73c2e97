"""
Primitive value types with explicit byte-order codecs.

Each primitive bundles three ``construct`` format fields (little, big and
native byte order) and exposes the primitive codec contract used by records:

    decode_le / decode_be / decode_ne (stream) -> value
    encode_le / encode_be / encode_ne (value, stream)

Primitives also satisfy the composite contract (``read`` / ``write``) so they
can be used in fields without a byte-order directive. That default encoding is
little-endian.

Supported Types:
    - Integers: U8, U16, U32, U64, I8, I16, I32, I64
    - Floating Point: F32, F64 (IEEE 754)
    - Boolean: Bool (single byte, 0x00 or non-zero)
"""

from typing import Any, BinaryIO, Optional
from construct import (
    Construct,
    Int8ul, Int8ub, Int8un, Int8sl, Int8sb, Int8sn,
    Int16ul, Int16ub, Int16un, Int16sl, Int16sb, Int16sn,
    Int32ul, Int32ub, Int32un, Int32sl, Int32sb, Int32sn,
    Int64ul, Int64ub, Int64un, Int64sl, Int64sb, Int64sn,
    Float32l, Float32b, Float32n,
    Float64l, Float64b, Float64n,
    Flag,
)


class Primitive:
    """
    A fixed-width value type that can be coded in any byte order.

    Instances are callable so they can stand in a type annotation:
    ``U16()`` returns the zero value and ``U16(7)`` coerces ``7``.
    """

    def __init__(self, name: str, python_type: type,
                 little: Construct, big: Construct, native: Construct):
        self.name = name
        self.python_type = python_type
        self.little = little
        self.big = big
        self.native = native

    def __repr__(self) -> str:
        return self.name

    def __call__(self, value: Optional[Any] = None) -> Any:
        if value is None:
            return self.zero()
        return self.python_type(value)

    def zero(self) -> Any:
        return self.python_type()

    def sizeof(self) -> int:
        return self.little.sizeof()

    # Primitive codec contract

    def decode_le(self, stream: BinaryIO) -> Any:
        return self.little.parse_stream(stream)

    def decode_be(self, stream: BinaryIO) -> Any:
        return self.big.parse_stream(stream)

    def decode_ne(self, stream: BinaryIO) -> Any:
        return self.native.parse_stream(stream)

    def encode_le(self, value: Any, stream: BinaryIO) -> None:
        self.little.build_stream(value, stream)

    def encode_be(self, value: Any, stream: BinaryIO) -> None:
        self.big.build_stream(value, stream)

    def encode_ne(self, value: Any, stream: BinaryIO) -> None:
        self.native.build_stream(value, stream)

    # Composite codec contract

    def read(self, stream: BinaryIO) -> Any:
        return self.decode_le(stream)

    def write(self, value: Any, stream: BinaryIO) -> None:
        self.encode_le(value, stream)


def is_primitive(value_type: Any) -> bool:
    """Check whether a type implements the primitive codec contract."""
    return all(
        callable(getattr(value_type, attr, None))
        for attr in ("decode_le", "decode_be", "decode_ne",
                     "encode_le", "encode_be", "encode_ne")
    )


# ============================================================================
# Integer Types
# ============================================================================

U8 = Primitive("U8", int, Int8ul, Int8ub, Int8un)
"""Unsigned 8-bit integer."""

U16 = Primitive("U16", int, Int16ul, Int16ub, Int16un)
"""Unsigned 16-bit integer."""

U32 = Primitive("U32", int, Int32ul, Int32ub, Int32un)
"""Unsigned 32-bit integer."""

U64 = Primitive("U64", int, Int64ul, Int64ub, Int64un)
"""Unsigned 64-bit integer."""

I8 = Primitive("I8", int, Int8sl, Int8sb, Int8sn)
"""Signed 8-bit integer."""

I16 = Primitive("I16", int, Int16sl, Int16sb, Int16sn)
"""Signed 16-bit integer."""

I32 = Primitive("I32", int, Int32sl, Int32sb, Int32sn)
"""Signed 32-bit integer."""

I64 = Primitive("I64", int, Int64sl, Int64sb, Int64sn)
"""Signed 64-bit integer."""


# ============================================================================
# Floating Point Types (IEEE 754)
# ============================================================================

F32 = Primitive("F32", float, Float32l, Float32b, Float32n)
"""32-bit floating point."""

F64 = Primitive("F64", float, Float64l, Float64b, Float64n)
"""64-bit floating point."""


# ============================================================================
# Boolean Type
# ============================================================================

Bool = Primitive("Bool", bool, Flag, Flag, Flag)
"""
8-bit boolean.

A single byte has no byte order, so all three codecs are ``Flag``:
0x00 decodes to False, any other byte to True.
"""

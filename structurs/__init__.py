"""
Declarative binary records built on the Construct library.

A record is an annotated class whose fields are read from and written to
binary streams in declaration order. Each field may carry directives through
``typing.Annotated``:

    - Byte order: ``"le"``, ``"be"``, ``"ne"`` (primitive types only).
      Without one, the element type's own read/write is used.
    - Padding: ``"pad"`` (size of the field's type) or ``"pad(bytes = N)"``.
      Padding fields read as zero values and write as zero bytes.

Fixed arrays are declared with ``FixedArray[element, length]``, where length
is an integer or a constant expression such as ``"COUNT * 2"``.

Usage:
    >>> from typing import Annotated
    >>> from structurs import record, FixedArray, U8, U16, pack, unpack
    >>>
    >>> @record
    >>> class Header:
    >>>     a: Annotated[U16, "le"]
    >>>     pad: Annotated[U8, "pad(bytes = 3)"]
    >>>     b: FixedArray[U8, 4]
    >>>
    >>> data = pack(Header(a=300, b=[1, 2, 3, 4]))
    >>> data.hex()
    '2c0100000001020304'
    >>> unpack(Header, data)
    Header(a=300, pad=0, b=[1, 2, 3, 4])
"""

import logging

from .api import (
    pack,
    unpack,
    read_record,
    write_record,
)

from .primitives import (
    Primitive,
    U8, U16, U32, U64, I8, I16, I32, I64,
    F32, F64,
    Bool,
)

from .attributes import (
    ByteOrder,
    Padding,
    Attributes,
    parse_attributes,
    parse_directive,
)

from .shapes import (
    FixedArray,
    Shape,
    resolve_shape,
)

from .schema import (
    FieldSpec,
    RecordSpec,
)

from .decorators import (
    record,
    make_record,
    is_record,
    compile_record,
)

from .exceptions import (
    RecordDefinitionError,
    DirectiveSyntaxError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Main API
    "pack",
    "unpack",
    "read_record",
    "write_record",
    # Primitive types
    "Primitive",
    "U8", "U16", "U32", "U64", "I8", "I16", "I32", "I64",
    "F32", "F64",
    "Bool",
    # Directives
    "ByteOrder",
    "Padding",
    "Attributes",
    "parse_attributes",
    "parse_directive",
    # Shapes
    "FixedArray",
    "Shape",
    "resolve_shape",
    # Schema
    "FieldSpec",
    "RecordSpec",
    # Declaration
    "record",
    "make_record",
    "is_record",
    "compile_record",
    # Errors
    "RecordDefinitionError",
    "DirectiveSyntaxError",
]

__version__ = "0.1.0"

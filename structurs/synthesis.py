"""
Synthesis of record read/write procedures.

Each FieldSpec is turned into one ``construct`` piece; the pieces are named
and concatenated in field order into a ``Struct`` wrapped by a RecordAdapter,
which converts between parsed containers and record instances.

Per-field composition:

    element piece   PrimitiveField (le/be/ne) or CompositeField (default)
    repeat          scalar: the element piece itself
                    array:  Array(count, element piece) as a plain list
    padding         PaddingField replaces both: filler bytes on the wire,
                    zero values in the record
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from construct import Adapter, Array, Construct, SizeofError, Struct
from construct.core import stream_read, stream_write

from .attributes import ByteOrder
from .exceptions import RecordDefinitionError
from .schema import FieldSpec, RecordSpec
from .shapes import zero_value

_LOGGER = logging.getLogger(__name__)


def element_size(element_type: Any) -> int:
    """Byte size of one element, as reported by its ``sizeof()``."""
    sizeof = getattr(element_type, "sizeof", None)
    if not callable(sizeof):
        raise SizeofError(f"{element_type!r} does not report a fixed size")
    return sizeof()


# ============================================================================
# Element Pieces
# ============================================================================

class PrimitiveField(Construct):
    """
    Construct for one primitive value in an explicit byte order.

    Dispatches to the element type's ``decode_<order>`` and
    ``encode_<order>`` entry points.
    """

    def __init__(self, element_type: Any, byte_order: ByteOrder):
        super().__init__()
        if byte_order is ByteOrder.DEFAULT:
            raise ValueError("PrimitiveField needs an explicit byte order")
        self.element_type = element_type
        self.byte_order = byte_order
        self._decode = getattr(element_type, f"decode_{byte_order.value}")
        self._encode = getattr(element_type, f"encode_{byte_order.value}")

    def _parse(self, stream, context, path):
        return self._decode(stream)

    def _build(self, obj, stream, context, path):
        self._encode(obj, stream)
        return obj

    def _sizeof(self, context, path):
        return element_size(self.element_type)


class CompositeField(Construct):
    """Construct delegating to the element type's own ``read``/``write``."""

    def __init__(self, element_type: Any):
        super().__init__()
        self.element_type = element_type

    def _parse(self, stream, context, path):
        return self.element_type.read(stream)

    def _build(self, obj, stream, context, path):
        self.element_type.write(obj, stream)
        return obj

    def _sizeof(self, context, path):
        return element_size(self.element_type)


class PaddingField(Construct):
    """
    Construct for filler bytes standing in for a field's value.

    Parsing consumes ``byte_count`` bytes without decoding them and returns a
    fresh zero value; building writes ``byte_count`` zero bytes whatever the
    field holds.
    """

    def __init__(self, byte_count: int, zero_factory: Callable[[], Any]):
        super().__init__()
        self.byte_count = byte_count
        self.zero_factory = zero_factory

    def _parse(self, stream, context, path):
        stream_read(stream, self.byte_count, path)
        return self.zero_factory()

    def _build(self, obj, stream, context, path):
        stream_write(stream, bytes(self.byte_count), self.byte_count, path)
        return obj

    def _sizeof(self, context, path):
        return self.byte_count


class FixedListAdapter(Adapter):
    """Presents a fixed ``Array`` as a plain Python list."""

    def _decode(self, obj, context, path) -> List[Any]:
        return list(obj)

    def _encode(self, obj, context, path) -> List[Any]:
        return list(obj)


class RecordAdapter(Adapter):
    """
    Adapter between a record's Struct and record instances.

    Field order of the Struct is the record's declared field order, for both
    parsing and building.
    """

    def __init__(self, record_cls: type, spec: RecordSpec, subcon: Construct):
        super().__init__(subcon)
        self.record_cls = record_cls
        self.spec = spec

    def _decode(self, obj, context, path):
        return self.record_cls(**{name: obj[name] for name in self.spec.field_names})

    def _encode(self, obj, context, path) -> Dict[str, Any]:
        return {name: getattr(obj, name) for name in self.spec.field_names}


# ============================================================================
# Synthesis
# ============================================================================

def element_piece(field: FieldSpec) -> Construct:
    """The read/write piece for a single element of ``field``."""
    if field.byte_order is ByteOrder.DEFAULT:
        return CompositeField(field.element_type)
    return PrimitiveField(field.element_type, field.byte_order)


def padding_piece(field: FieldSpec, count: int) -> PaddingField:
    """Filler piece for a padding field repeated ``count`` times."""
    element_type = field.element_type
    if field.padding.is_auto:
        try:
            byte_count = field.padding.size_for(element_size(element_type), count)
        except SizeofError as exc:
            raise RecordDefinitionError(
                f"field '{field.name}': auto padding needs the size of {element_type!r}: {exc}"
            ) from exc
    else:
        byte_count = field.padding.byte_count

    if field.shape.is_array:
        def zero_factory():
            return [zero_value(element_type) for _ in range(count)]
    else:
        def zero_factory():
            return zero_value(element_type)
    return PaddingField(byte_count, zero_factory)


def synthesize_field(field: FieldSpec, globalns: Optional[Dict[str, Any]] = None,
                     localns: Optional[Dict[str, Any]] = None) -> Construct:
    """
    Build the construct piece of one field.

    Symbolic array lengths are evaluated here, in ``globalns``/``localns``.

    Raises:
        RecordDefinitionError: Unresolvable length or unsized auto padding.
    """
    try:
        count = field.shape.resolve_count(globalns, localns)
    except RecordDefinitionError as exc:
        raise RecordDefinitionError(f"field '{field.name}': {exc}") from exc

    if field.padding is not None:
        piece = padding_piece(field, count)
        _LOGGER.debug("Field %s: %d padding bytes", field.name, piece.byte_count)
        return piece

    piece = element_piece(field)
    if field.shape.is_array:
        piece = FixedListAdapter(Array(count, piece))
    _LOGGER.debug("Field %s: %r x%d (%s)", field.name, field.element_type, count,
                  field.byte_order.value)
    return piece


def synthesize_record(record_cls: type, spec: RecordSpec,
                      globalns: Optional[Dict[str, Any]] = None,
                      localns: Optional[Dict[str, Any]] = None) -> RecordAdapter:
    """
    Build the construct that reads and writes ``record_cls`` instances.

    Returns:
        RecordAdapter whose ``parse_stream`` returns a record instance and
        whose ``build_stream`` writes one.
    """
    pieces = [field.name / synthesize_field(field, globalns, localns) for field in spec]
    _LOGGER.debug("Synthesized record %s with %d fields", spec.name, len(pieces))
    return RecordAdapter(record_cls, spec, Struct(*pieces))

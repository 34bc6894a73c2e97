"""
Record declaration: the ``@record`` decorator and ``make_record``.

This module turns an annotated class into a record type that reads itself
from and writes itself to binary streams.
"""

import dataclasses
import functools
import inspect
import sys
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, get_origin, get_type_hints

from construct import Construct

from .exceptions import RecordDefinitionError
from .schema import FieldSpec, RecordSpec
from .shapes import zero_value
from .synthesis import synthesize_record


def is_record(obj: Any) -> bool:
    """
    Check if a class, or the class of an instance, is a ``@record`` type.

    Args:
        obj: Class or instance to check

    Returns:
        True if it was declared with ``@record`` or ``make_record``
    """
    cls = obj if isinstance(obj, type) else type(obj)
    return getattr(cls, "__is_record__", False) is True


def _namespaces(cls: type) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(getattr(cls, "__record_constants__", {}))
    localns.update(vars(cls))
    return globalns, localns


def compile_record(cls: type) -> Construct:
    """
    Synthesize (once) and return the construct that codes ``cls`` instances.

    Raises:
        TypeError: If ``cls`` is not a record type.
        RecordDefinitionError: If the record cannot be synthesized, e.g.
            a symbolic array length does not resolve.
    """
    if not is_record(cls):
        raise TypeError(f"{cls!r} is not a record type; decorate it with @record")
    compiled = cls.__dict__.get("__record_construct__")
    if compiled is None:
        globalns, localns = _namespaces(cls)
        compiled = synthesize_record(cls, cls.__record_spec__, globalns, localns)
        cls.__record_construct__ = compiled
    return compiled


def _field_zero(cls: type, field: FieldSpec) -> Any:
    if field.shape.is_array:
        globalns, localns = _namespaces(cls)
        count = field.shape.resolve_count(globalns, localns)
        return [zero_value(field.element_type) for _ in range(count)]
    return zero_value(field.element_type)


# ============================================================================
# Record Methods
# ============================================================================

def _read(cls, stream):
    """Read one instance from a binary stream."""
    return compile_record(cls).parse_stream(stream)


def _from_bytes(cls, data: bytes):
    """Read one instance from the start of ``data``."""
    return compile_record(cls).parse(data)


def _write(self, stream) -> None:
    """Write this instance to a binary stream."""
    compile_record(type(self)).build_stream(self, stream)


def _to_bytes(self) -> bytes:
    """Serialize this instance to bytes."""
    return compile_record(type(self)).build(self)


def _sizeof(cls) -> int:
    """Number of bytes one instance occupies on the wire."""
    return compile_record(cls).sizeof()


def _zero(cls):
    """Instance with every field set to its zero value."""
    return cls(**{field.name: _field_zero(cls, field) for field in cls.__record_spec__})


# ============================================================================
# Decorator
# ============================================================================

def _own_annotations(cls: type, hints: Dict[str, Any]) -> Iterable[Tuple[str, Any]]:
    for name in inspect.get_annotations(cls):
        hint = hints.get(name)
        if hint is None or get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        yield name, hint


def _process_class(cls: type, readable: bool, writable: bool,
                   dataclass_options: Dict[str, Any]) -> type:
    if not isinstance(cls, type):
        raise RecordDefinitionError(f"@record can only decorate classes, got {cls!r}")
    if issubclass(cls, tuple):
        raise RecordDefinitionError(
            f"@record only supports classes with named fields; '{cls.__name__}' is a tuple type"
        )
    if not (readable or writable):
        raise RecordDefinitionError(f"record '{cls.__name__}' must be readable, writable or both")

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise RecordDefinitionError(
            f"cannot resolve field types of '{cls.__name__}': {exc}"
        ) from exc

    if "__dataclass_fields__" not in cls.__dict__:
        for name, hint in _own_annotations(cls, hints):
            if name in cls.__dict__:
                continue
            field = FieldSpec.from_annotation(name, hint)
            setattr(cls, name, dataclasses.field(default_factory=functools.partial(_field_zero, cls, field)))
        cls = dataclasses.dataclass(cls, **dataclass_options)

    spec = RecordSpec.from_fields(
        cls.__name__, [(f.name, hints[f.name]) for f in dataclasses.fields(cls)]
    )
    for field in spec:
        field.check_contract(readable=readable, writable=writable)

    cls.__record_spec__ = spec
    cls.__record_construct__ = None
    cls.__is_record__ = True
    cls.__record_readable__ = readable
    cls.__record_writable__ = writable

    cls.sizeof = classmethod(_sizeof)
    cls.zero = classmethod(_zero)
    if readable:
        cls.read = classmethod(_read)
        cls.from_bytes = classmethod(_from_bytes)
    if writable:
        cls.write = _write
        cls.to_bytes = _to_bytes

    # Synthesize now so that unresolved lengths and unsized padding fail here.
    compile_record(cls)
    return cls


def record(cls: Optional[type] = None, *, readable: bool = True, writable: bool = True,
           **dataclass_options):
    """
    Decorator declaring a binary record type.

    Every annotated field becomes part of the wire layout, in declaration
    order (base record fields first). The class is turned into a dataclass;
    fields without a default get their zero value as default.

    Args:
        readable: Attach ``read`` and ``from_bytes``.
        writable: Attach ``write`` and ``to_bytes``.
        **dataclass_options: Passed to ``dataclasses.dataclass``.

    The record is synthesized immediately, so every configuration error is
    raised here and never by a later read or write.

    Raises:
        RecordDefinitionError: On unnamed fields, malformed directives,
            unsupported element types, invalid or unresolvable array lengths
            and auto padding on types without a fixed size.

    Examples:
        >>> @record
        >>> class Header:
        >>>     a: Annotated[U16, "le"]
        >>>     pad: Annotated[U8, "pad(bytes = 3)"]
        >>>     b: FixedArray[U8, 4]
        >>>
        >>> Header(a=300, b=[1, 2, 3, 4]).to_bytes().hex()
        '2c0100000001020304'
    """
    def wrap(cls):
        return _process_class(cls, readable, writable, dataclass_options)

    if cls is None:
        return wrap
    return wrap(cls)


def make_record(name: str, fields, *, bases: Tuple[type, ...] = (),
                namespace: Optional[Dict[str, Any]] = None, module: str = "__main__",
                readable: bool = True, writable: bool = True, **dataclass_options) -> type:
    """
    Create a record type from a list of ``(name, type)`` pairs.

    ``namespace`` provides constants for symbolic array lengths and extra
    class attributes. ``module`` becomes the class's ``__module__``; its
    constants are visible to symbolic array lengths too. Callers pass their
    own ``__name__``; it defaults to ``"__main__"``.

    Raises:
        RecordDefinitionError: If an entry is not a named field, or the
            record cannot be synthesized.
    """
    fields = list(fields)
    RecordSpec.from_fields(name, fields)

    body = dict(namespace or {})
    body["__annotations__"] = dict(fields)
    body["__module__"] = module
    body["__record_constants__"] = dict(namespace or {})
    cls = type(name, bases, body)
    return record(cls, readable=readable, writable=writable, **dataclass_options)

"""
Record schema: ordered field descriptions built from class annotations.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Iterator, Optional, Tuple, get_args, get_origin

from .attributes import ByteOrder, Padding, parse_attributes
from .exceptions import RecordDefinitionError
from .primitives import is_primitive
from .shapes import Shape, resolve_shape

_LOGGER = logging.getLogger(__name__)

RESERVED_NAMES = frozenset({"read", "write", "sizeof", "zero", "from_bytes", "to_bytes"})
"""Record codec methods; fields may not shadow them."""


@dataclass(frozen=True)
class FieldSpec:
    """One declared field of a record, in wire order."""

    name: str
    value_type: Any
    element_type: Any
    shape: Shape
    byte_order: ByteOrder = ByteOrder.DEFAULT
    padding: Optional[Padding] = None

    @classmethod
    def from_annotation(cls, name: str, annotation: Any) -> "FieldSpec":
        """
        Build a FieldSpec from a (possibly ``Annotated``) type annotation.

        Raises:
            RecordDefinitionError: Invalid name, shape or directives.
        """
        if not isinstance(name, str) or not name.isidentifier():
            raise RecordDefinitionError(f"field name must be an identifier, got {name!r}")
        if name.startswith("_"):
            raise RecordDefinitionError(f"field name '{name}' is reserved: names may not start with '_'")
        if name in RESERVED_NAMES:
            raise RecordDefinitionError(f"field name '{name}' shadows a record method")

        metadata: Tuple[Any, ...] = ()
        value_type = annotation
        if get_origin(annotation) is Annotated:
            value_type, *extra = get_args(annotation)
            metadata = tuple(extra)

        attributes = parse_attributes(metadata, name)
        element_type, shape = resolve_shape(value_type, name)
        return cls(
            name=name,
            value_type=value_type,
            element_type=element_type,
            shape=shape,
            byte_order=attributes.byte_order,
            padding=attributes.padding,
        )

    def check_contract(self, readable: bool = True, writable: bool = True) -> None:
        """
        Verify that the element type supports the codec this field dispatches to.

        Padding fields never decode or encode their element type.
        """
        if self.padding is not None:
            return
        if self.byte_order is not ByteOrder.DEFAULT:
            if not is_primitive(self.element_type):
                raise RecordDefinitionError(
                    f"field '{self.name}': byte order '{self.byte_order.value}' requires a "
                    f"primitive type, got {self.element_type!r}"
                )
            return
        required = [attr for attr, wanted in (("read", readable), ("write", writable)) if wanted]
        missing = [attr for attr in required if not callable(getattr(self.element_type, attr, None))]
        if missing:
            raise RecordDefinitionError(
                f"field '{self.name}': type {self.element_type!r} does not implement "
                f"{', '.join(missing)}"
            )


@dataclass(frozen=True)
class RecordSpec:
    """Ordered field list of one record type."""

    name: str
    fields: Tuple[FieldSpec, ...]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(field.name for field in self.fields)

    @classmethod
    def from_fields(cls, name: str, fields) -> "RecordSpec":
        """
        Build a RecordSpec from ``(name, annotation)`` pairs in wire order.

        Raises:
            RecordDefinitionError: Unnamed fields, duplicate names or invalid fields.
        """
        specs = []
        seen = set()
        for position, entry in enumerate(fields):
            if not isinstance(entry, tuple) or len(entry) != 2 or not isinstance(entry[0], str):
                raise RecordDefinitionError(
                    f"record '{name}' only supports named fields; entry {position} "
                    f"is positional: {entry!r}"
                )
            field_name, annotation = entry
            if field_name in seen:
                raise RecordDefinitionError(f"record '{name}' declares field '{field_name}' twice")
            seen.add(field_name)
            specs.append(FieldSpec.from_annotation(field_name, annotation))

        spec = cls(name, tuple(specs))
        _LOGGER.debug("Record spec %s: %s", name, ", ".join(spec.field_names) or "(no fields)")
        return spec

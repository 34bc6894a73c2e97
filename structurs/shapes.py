"""
Field shapes: scalar values and fixed-size arrays.

A fixed array is declared with ``FixedArray[element_type, length]``. The
length is either an integer literal or a string holding a constant
expression (names, integers and + - * //), resolved against the defining
module and class when the record class is defined:

    >>> CHANNELS = 4
    >>> samples: FixedArray[I16, 8]
    >>> gains: FixedArray[F32, "CHANNELS"]
    >>> table: Annotated[FixedArray[U8, "CHANNELS * 2"], "pad"]
"""

import ast
import operator
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import RecordDefinitionError


class FixedArray:
    """Type descriptor of a homogeneous, fixed-count array."""

    def __init__(self, element_type: Any, length: Union[int, str]):
        self.element_type = element_type
        self.length = length

    def __class_getitem__(cls, params) -> "FixedArray":
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError("FixedArray[...] expects an element type and a length")
        element_type, length = params
        return cls(element_type, length)

    def __call__(self, values: Optional[List[Any]] = None) -> List[Any]:
        if values is not None:
            return list(values)
        if not isinstance(self.length, int):
            raise TypeError(f"{self!r} has a symbolic length")
        return [zero_value(self.element_type) for _ in range(self.length)]

    def __repr__(self) -> str:
        return f"FixedArray[{self.element_type!r}, {self.length!r}]"


@dataclass(frozen=True)
class Shape:
    """
    Repeat structure of a field.

    ``length`` is None for a scalar, an int for a literal array length or a
    string for a constant expression of names, integers and + - * //,
    resolved when the record is defined.
    """

    length: Union[int, str, None] = None

    @classmethod
    def scalar(cls) -> "Shape":
        return cls()

    @classmethod
    def array(cls, length: Union[int, str]) -> "Shape":
        return cls(length)

    @property
    def is_array(self) -> bool:
        return self.length is not None

    @property
    def is_symbolic(self) -> bool:
        return isinstance(self.length, str)

    def resolve_count(self, globalns: Optional[Dict[str, Any]] = None,
                      localns: Optional[Dict[str, Any]] = None) -> int:
        """
        Number of elements, evaluating a symbolic length in the given namespaces.

        Names are looked up in ``localns`` first, then ``globalns``.

        Raises:
            RecordDefinitionError: If the expression fails or is not a
                non-negative integer.
        """
        if self.length is None:
            return 1
        if not self.is_symbolic:
            return self.length
        tree = _parse_length(self.length)
        try:
            value = _evaluate(tree.body, self.length, globalns or {}, localns or {})
        except ZeroDivisionError as exc:
            raise RecordDefinitionError(
                f"array length expression {self.length!r} could not be resolved: {exc}"
            ) from exc
        if value < 0:
            raise RecordDefinitionError(
                f"array length expression {self.length!r} must resolve to a "
                f"non-negative integer, got {value!r}"
            )
        return value


_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.FloorDiv: operator.floordiv,
}
_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_node(node: ast.AST, expression: str) -> None:
    if isinstance(node, ast.Name):
        return
    if isinstance(node, ast.Constant) and _is_integer(node.value):
        return
    if isinstance(node, ast.BinOp) and type(node.op) in _OPERATORS:
        _check_node(node.left, expression)
        _check_node(node.right, expression)
        return
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        _check_node(node.operand, expression)
        return
    raise RecordDefinitionError(
        f"array length {expression!r} is neither an integer literal nor a constant "
        f"expression: unsupported element {ast.dump(node)}"
    )


def _parse_length(expression: str) -> ast.Expression:
    """Parse a length expression made of names, integers and + - * //."""
    try:
        tree = ast.parse(expression.strip(), "<array length>", mode="eval")
    except SyntaxError as exc:
        raise RecordDefinitionError(
            f"array length {expression!r} is neither an integer literal "
            f"nor a constant expression: {exc.msg}"
        ) from exc
    _check_node(tree.body, expression)
    return tree


def _evaluate(node: ast.AST, expression: str,
              globalns: Dict[str, Any], localns: Dict[str, Any]) -> int:
    if isinstance(node, ast.Constant):
        return node.value
    if isinstance(node, ast.Name):
        if node.id in localns:
            value = localns[node.id]
        elif node.id in globalns:
            value = globalns[node.id]
        else:
            raise RecordDefinitionError(
                f"array length expression {expression!r} could not be resolved: "
                f"name '{node.id}' is not defined"
            )
        if not _is_integer(value):
            raise RecordDefinitionError(
                f"array length expression {expression!r} must resolve to a "
                f"non-negative integer, but '{node.id}' is {value!r}"
            )
        return value
    if isinstance(node, ast.BinOp):
        return _OPERATORS[type(node.op)](
            _evaluate(node.left, expression, globalns, localns),
            _evaluate(node.right, expression, globalns, localns),
        )
    return _UNARY_OPERATORS[type(node.op)](_evaluate(node.operand, expression, globalns, localns))


def _classify_length(length: Any, field_name: Optional[str]) -> Union[int, str]:
    where = f" of field '{field_name}'" if field_name else ""
    if isinstance(length, bool):
        raise RecordDefinitionError(f"array length{where} must be an integer, got {length!r}")
    if isinstance(length, int):
        if length < 0:
            raise RecordDefinitionError(f"array length{where} must be non-negative, got {length}")
        return length
    if isinstance(length, str):
        _parse_length(length)
        return length
    raise RecordDefinitionError(
        f"array length{where} is neither an integer literal nor a constant "
        f"expression: {length!r}"
    )


def resolve_shape(value_type: Any, field_name: Optional[str] = None) -> Tuple[Any, Shape]:
    """
    Split a declared field type into its element type and shape.

    Returns:
        ``(element_type, Shape.array(length))`` for a FixedArray,
        ``(value_type, Shape.scalar())`` otherwise.
    """
    if isinstance(value_type, FixedArray):
        return value_type.element_type, Shape.array(_classify_length(value_type.length, field_name))
    return value_type, Shape.scalar()


def zero_value(value_type: Any) -> Any:
    """Zero/default value of an element type."""
    zero = getattr(value_type, "zero", None)
    if callable(zero):
        return zero()
    return value_type()

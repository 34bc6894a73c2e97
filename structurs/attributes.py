"""
Field directives: byte order and padding.

Directives are attached to a field through ``typing.Annotated`` metadata,
either as text or as typed values:

    >>> a: Annotated[U16, "le"]
    >>> b: Annotated[U32, ByteOrder.BIG]
    >>> c: Annotated[U8, "pad"]               # Auto padding
    >>> d: Annotated[U8, "pad(bytes = 3)"]    # Explicit padding
    >>> e: Annotated[U8, Padding.explicit(3)]

Text whose leading identifier is not a directive keyword, in any letter
case, is treated as a foreign annotation and ignored. Keywords are written
in lower case; "LE" or "Pad(...)" is an error.
"""

import enum
import io
import re
import tokenize
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from .exceptions import DirectiveSyntaxError, RecordDefinitionError


class ByteOrder(enum.Enum):
    """How a field's elements are decoded and encoded."""

    LITTLE = "le"
    BIG = "be"
    NATIVE = "ne"
    DEFAULT = "default"
    """Delegate to the element type's own read/write contract."""


@dataclass(frozen=True)
class Padding:
    """
    Padding directive: the field is filler bytes instead of an encoded value.

    ``byte_count`` is None for Auto padding (sized from the field's element
    type and repeat count) or the explicit number of filler bytes.
    """

    byte_count: Optional[int] = None

    @classmethod
    def auto(cls) -> "Padding":
        return cls()

    @classmethod
    def explicit(cls, byte_count: int) -> "Padding":
        if isinstance(byte_count, bool) or not isinstance(byte_count, int) or byte_count < 0:
            raise RecordDefinitionError(
                f"padding byte count must be a non-negative integer, got {byte_count!r}"
            )
        return cls(byte_count)

    @property
    def is_auto(self) -> bool:
        return self.byte_count is None

    def size_for(self, element_size: int, count: int) -> int:
        """Number of filler bytes for ``count`` elements of ``element_size`` bytes."""
        if self.byte_count is None:
            return element_size * count
        return self.byte_count


@dataclass(frozen=True)
class Attributes:
    """Resolved directives of one field."""

    byte_order: ByteOrder = ByteOrder.DEFAULT
    padding: Optional[Padding] = None


_BYTE_ORDER_KEYWORDS = {
    "le": ByteOrder.LITTLE,
    "be": ByteOrder.BIG,
    "ne": ByteOrder.NATIVE,
}
_PADDING_KEYWORD = "pad"
_LEADING_IDENTIFIER = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)")
_IGNORED_TOKENS = (
    tokenize.NEWLINE, tokenize.NL, tokenize.ENDMARKER,
    tokenize.INDENT, tokenize.DEDENT, tokenize.COMMENT,
)


def is_directive(text: str) -> bool:
    """
    Check whether annotation text is meant as a field directive.

    Keywords match case-insensitively so that near misses such as "LE" or
    "Pad(bytes = 3)" are reported by parse_directive instead of being ignored.
    """
    match = _LEADING_IDENTIFIER.match(text)
    if match is None:
        return False
    keyword = match.group(1).lower()
    return keyword in _BYTE_ORDER_KEYWORDS or keyword == _PADDING_KEYWORD


def _tokenize(text: str) -> List[tokenize.TokenInfo]:
    tokens = []
    try:
        for token in tokenize.generate_tokens(io.StringIO(text.strip()).readline):
            if token.type not in _IGNORED_TOKENS:
                tokens.append(token)
    except (tokenize.TokenError, SyntaxError):
        # Unbalanced grouping: keep what was read, the parser reports
        # the first missing token.
        pass
    return tokens


def _parse_integer_literal(token: tokenize.TokenInfo) -> Optional[int]:
    if token.type != tokenize.NUMBER:
        return None
    try:
        return int(token.string, 0)
    except ValueError:
        return None


def _parse_padding_arguments(text: str, tokens: List[tokenize.TokenInfo],
                             field_name: Optional[str]) -> Padding:
    def next_token() -> Optional[tokenize.TokenInfo]:
        return tokens.pop(0) if tokens else None

    def fail(expected: str, token: Optional[tokenize.TokenInfo]):
        raise DirectiveSyntaxError(
            text, expected, token.string if token is not None else None, field_name
        )

    token = next_token()
    if token is None:
        return Padding.auto()
    if token.string != "(":
        fail("'(' or end of directive", token)

    token = next_token()
    if token is None or token.type != tokenize.NAME or token.string != "bytes":
        fail("identifier 'bytes'", token)

    token = next_token()
    if token is None or token.type != tokenize.OP or token.string != "=":
        fail("punctuation '='", token)

    token = next_token()
    byte_count = _parse_integer_literal(token) if token is not None else None
    if byte_count is None:
        fail("an integer literal", token)

    token = next_token()
    if token is None or token.string != ")":
        fail("')'", token)
    if tokens:
        fail("end of directive", tokens[0])

    return Padding.explicit(byte_count)


def parse_directive(text: str, field_name: Optional[str] = None) -> Any:
    """
    Parse one directive string into a ByteOrder or a Padding.

    Raises:
        DirectiveSyntaxError: If the text does not match the directive's shape.
    """
    tokens = _tokenize(text)
    if not tokens or tokens[0].type != tokenize.NAME:
        raise DirectiveSyntaxError(
            text, "a directive keyword", tokens[0].string if tokens else None, field_name
        )
    keyword = tokens.pop(0).string

    if keyword in _BYTE_ORDER_KEYWORDS:
        if tokens:
            raise DirectiveSyntaxError(text, "end of directive", tokens[0].string, field_name)
        return _BYTE_ORDER_KEYWORDS[keyword]
    if keyword == _PADDING_KEYWORD:
        return _parse_padding_arguments(text, tokens, field_name)

    raise DirectiveSyntaxError(
        text, "one of 'le', 'be', 'ne', 'pad'", keyword, field_name
    )


def parse_attributes(metadata: Iterable[Any], field_name: Optional[str] = None) -> Attributes:
    """
    Resolve the byte order and padding of a field from its annotation metadata.

    Args:
        metadata: The ``Annotated`` metadata attached to the field.
        field_name: Used in error messages.

    Returns:
        Attributes with ``ByteOrder.DEFAULT`` when no byte order is given.

    Raises:
        DirectiveSyntaxError: Malformed directive text.
        RecordDefinitionError: More than one byte order or padding directive.
    """
    byte_order = None
    padding = None
    where = f" '{field_name}'" if field_name else ""

    for item in metadata:
        if isinstance(item, str):
            if not is_directive(item):
                continue
            item = parse_directive(item, field_name)

        if isinstance(item, ByteOrder):
            if byte_order is not None:
                raise RecordDefinitionError(
                    f"field{where} declares more than one byte order: "
                    f"{byte_order.value}, {item.value}"
                )
            byte_order = item
        elif isinstance(item, Padding):
            if padding is not None:
                raise RecordDefinitionError(f"field{where} declares more than one padding directive")
            padding = item

    return Attributes(
        byte_order=byte_order if byte_order is not None else ByteOrder.DEFAULT,
        padding=padding,
    )

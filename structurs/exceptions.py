"""
Exceptions raised while defining records.

Run-time read and write failures are not wrapped: they surface as the
``construct`` errors (``StreamError``, ``RangeError``, ...) raised by the
underlying stream operations.
"""

from typing import Any, Optional


class RecordDefinitionError(TypeError):
    """A record declaration cannot be turned into read/write procedures."""


class DirectiveSyntaxError(RecordDefinitionError):
    """
    A field directive does not match its expected token shape.

    Attributes:
        directive: The directive text as written on the field.
        expected: Description of the token that was expected.
        found: The token actually found (None at end of input).
    """

    def __init__(self, directive: str, expected: str, found: Optional[Any],
                 field_name: Optional[str] = None):
        self.directive = directive
        self.expected = expected
        self.found = found
        self.field_name = field_name
        where = f" on field '{field_name}'" if field_name else ""
        found_text = "end of directive" if found is None else repr(found)
        super().__init__(
            f"malformed directive {directive!r}{where}: "
            f"expected {expected}, but found: {found_text}"
        )

"""Function contract shared by every masking algorithm, and the row adapter."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from ..core.exceptions import MalformedRowError

Row = Sequence[Any]


@runtime_checkable
class TokenizeFn(Protocol):
    """
    A masking algorithm over an ordered list of string values.

    Both operations are one-to-one and order-preserving: output[i] is the
    transform of values[i].
    """

    def tokenize(self, values: Sequence[str]) -> list[str]:
        ...

    def reidentify(self, values: Sequence[str]) -> list[str]:
        ...


def unary_string_args(rows: Sequence[Row]) -> list[str]:
    """
    Reduce each row of call arguments to the text of its first argument.

    Args:
        rows: Rows of positional arguments, as sent in a remote function call

    Returns:
        One string per row, in row order

    Raises:
        MalformedRowError: If a row has no arguments, is not a list of
            arguments, or its first argument is NULL
    """
    values = []
    for index, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise MalformedRowError(
                f"Row {index} is not a list of arguments", row_index=index, expected_arity=1
            )
        if len(row) == 0:
            raise MalformedRowError(
                f"Row {index} has no arguments, expected at least 1",
                row_index=index,
                expected_arity=1,
            )
        if row[0] is None:
            raise MalformedRowError(
                f"Row {index} has a NULL first argument", row_index=index, expected_arity=1
            )
        values.append(_to_text(row[0]))
    return values


def _to_text(value: Any) -> str:
    # JSON booleans arrive as Python bools; keep BigQuery's lowercase spelling
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UnaryStringArgFn:
    """Applies a TokenizeFn to rows, through the unary argument adapter."""

    def __init__(self, fn: TokenizeFn):
        self.fn = fn

    def tokenize(self, rows: Sequence[Row]) -> list[str]:
        return self.fn.tokenize(unary_string_args(rows))

    def reidentify(self, rows: Sequence[Row]) -> list[str]:
        return self.fn.reidentify(unary_string_args(rows))

    def __repr__(self) -> str:
        return f"UnaryStringArgFn({self.fn!r})"

"""Reversible Base64 encoding of UTF-8 text."""

import binascii
from collections.abc import Sequence

from ..core.exceptions import DecodeError
from ..core.security import b64decode_strict, b64encode_str


class Base64Fn:
    """Standard Base64 with padding and no line wrapping."""

    def tokenize(self, values: Sequence[str]) -> list[str]:
        return [b64encode_str(value.encode("utf-8")) for value in values]

    def reidentify(self, values: Sequence[str]) -> list[str]:
        results = []
        for index, value in enumerate(values):
            try:
                results.append(b64decode_strict(value).decode("utf-8"))
            except (binascii.Error, ValueError) as e:
                # UnicodeDecodeError is a ValueError
                raise DecodeError(
                    f"Row {index} is not valid Base64 encoded UTF-8 text", row_index=index
                ) from e
        return results

    def __repr__(self) -> str:
        return "Base64Fn()"

"""No-op function, returns values unchanged in both directions."""

from collections.abc import Sequence


class IdentityFn:
    def tokenize(self, values: Sequence[str]) -> list[str]:
        return list(values)

    def reidentify(self, values: Sequence[str]) -> list[str]:
        return list(values)

    def __repr__(self) -> str:
        return "IdentityFn()"

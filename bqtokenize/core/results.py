"""Result of one remote function call."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    Either the values of the whole batch or an error, never both.

    There is no partial success: one bad row fails the batch, because the
    caller has no way to receive per-row errors.
    """

    values: Optional[list[str]] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.values is None) == (self.error is None):
            raise ValueError("ResponseEnvelope must carry exactly one of values or error")

    @classmethod
    def success(cls, values: list[str]) -> "ResponseEnvelope":
        return cls(values=list(values))

    @classmethod
    def failure(cls, error: str) -> "ResponseEnvelope":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {"values": self.values, "error": self.error}

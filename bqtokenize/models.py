"""Wire models for BigQuery remote function calls."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .core.results import ResponseEnvelope


class RemoteFnRequest(BaseModel):
    """Request body BigQuery sends to a remote function endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_id: Optional[str] = Field(default=None, alias="requestId")
    caller: Optional[str] = None
    session_user: Optional[str] = Field(default=None, alias="sessionUser")
    user_defined_context: dict[str, str] = Field(
        default_factory=dict, alias="userDefinedContext"
    )
    calls: list[list[Any]] = Field(default_factory=list)


class RemoteFnResponse(BaseModel):
    """Response body: ``replies`` on success, ``errorMessage`` on failure."""

    model_config = ConfigDict(populate_by_name=True)

    replies: Optional[list[str]] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")

    @classmethod
    def from_envelope(cls, envelope: ResponseEnvelope) -> "RemoteFnResponse":
        return cls(replies=envelope.values, error_message=envelope.error)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire field names, leaving out the unset half."""
        return self.model_dump(by_alias=True, exclude_none=True)

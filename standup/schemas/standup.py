from typing import Any

from pydantic import BaseModel, ConfigDict

from standup.models.standup import SinkOutcome


class StandupRequest(BaseModel):
    # Required fields are checked by the service so a missing one maps to 400, not 422.
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    yesterday: str | None = None
    today: str | None = None
    blockers: str | None = None


class SinkStatus(BaseModel):
    success: bool
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: SinkOutcome) -> "SinkStatus":
        return cls(success=outcome.succeeded, error=outcome.error)


class StandupResponse(BaseModel):
    message: str
    chat: SinkStatus
    sheet: SinkStatus


class SinkErrors(BaseModel):
    chat: str | None = None
    sheet: str | None = None


class StandupFailureResponse(BaseModel):
    message: str
    errors: SinkErrors


class LastEntryResponse(BaseModel):
    message: str
    data: Any = None


class ErrorResponse(BaseModel):
    message: str
    error: str | None = None

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

UNKNOWN_NAME = "Unknown"
NO_BLOCKERS = "None"


def thread_key(day: date) -> str:
    """Chat thread key shared by every stand-up posted on the same calendar day."""
    return f"standup-{day.isoformat()}"


@dataclass(frozen=True)
class StandupRecord:
    yesterday: str
    today: str
    name: str = ""
    email: str = ""
    blockers: str = ""

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_NAME

    @property
    def blockers_text(self) -> str:
        return self.blockers or NO_BLOCKERS

    def as_log_row(self) -> dict:
        return {
            "name": self.display_name,
            "email": self.email,
            "yesterday": self.yesterday,
            "today": self.today,
            "blockers": self.blockers,
        }


@dataclass(frozen=True)
class SinkOutcome:
    succeeded: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "SinkOutcome":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, error: str) -> "SinkOutcome":
        return cls(succeeded=False, error=error)


class OverallStatus(str, Enum):
    FULL_SUCCESS = "full_success"
    PARTIAL_CHAT_ONLY = "partial_chat_only"
    PARTIAL_LOG_ONLY = "partial_log_only"
    FULL_FAILURE = "full_failure"


def classify(chat: SinkOutcome, log: SinkOutcome) -> OverallStatus:
    if chat.succeeded and log.succeeded:
        return OverallStatus.FULL_SUCCESS
    if chat.succeeded:
        return OverallStatus.PARTIAL_CHAT_ONLY
    if log.succeeded:
        return OverallStatus.PARTIAL_LOG_ONLY
    return OverallStatus.FULL_FAILURE


@dataclass(frozen=True)
class SubmissionResult:
    chat: SinkOutcome
    log: SinkOutcome
    status: OverallStatus

    @classmethod
    def from_outcomes(cls, chat: SinkOutcome, log: SinkOutcome) -> "SubmissionResult":
        return cls(chat=chat, log=log, status=classify(chat, log))

    @property
    def any_succeeded(self) -> bool:
        return self.status is not OverallStatus.FULL_FAILURE


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a last-entry query that keeps "never submitted" apart from "query failed"."""

    # Whatever the log service returned as the row: usually an object, sometimes a list or string.
    data: Any = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.data is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

import asyncio
import logging
from typing import Any, Awaitable

from standup.models.standup import OverallStatus, SinkOutcome, StandupRecord, SubmissionResult
from standup.schemas.standup import StandupRequest
from standup.services.chat_service import ChatService
from standup.services.sheet_service import SheetService

logger = logging.getLogger(__name__)


class StandupError(Exception):
    pass


class InvalidSubmission(StandupError):
    pass


class MissingIdentity(StandupError):
    pass


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


async def gather_outcomes(calls: dict[str, Awaitable[SinkOutcome]]) -> dict[str, SinkOutcome]:
    """
    Await every sink call and return one outcome per name.
    All calls run to completion; an exception escaping one sink fails only that slot.
    """
    names = list(calls)
    settled = await asyncio.gather(*calls.values(), return_exceptions=True)
    outcomes = {}
    for name, result in zip(names, settled):
        if isinstance(result, BaseException):
            logger.error("[standup] sink %s raised | error=%r", name, result)
            outcomes[name] = SinkOutcome.failed(str(result))
        else:
            outcomes[name] = result
    return outcomes


class StandupService:
    def __init__(self, chat: ChatService, sheet: SheetService) -> None:
        self._chat = chat
        self._sheet = sheet

    def validate(self, payload: StandupRequest) -> StandupRecord:
        """Raises InvalidSubmission unless both yesterday and today carry text."""
        if _is_blank(payload.yesterday) or _is_blank(payload.today):
            raise InvalidSubmission("Yesterday and Today fields are required")
        return StandupRecord(
            name=payload.name or "",
            email=payload.email or "",
            yesterday=payload.yesterday,
            today=payload.today,
            blockers=payload.blockers or "",
        )

    async def submit(self, payload: StandupRequest) -> SubmissionResult:
        record = self.validate(payload)
        outcomes = await gather_outcomes(
            {"chat": self._chat.post(record), "sheet": self._sheet.append(record)}
        )
        result = SubmissionResult.from_outcomes(outcomes["chat"], outcomes["sheet"])

        if result.status is OverallStatus.FULL_FAILURE:
            logger.error(
                "[standup] both sinks failed | chat=%s | sheet=%s",
                result.chat.error,
                result.log.error,
            )
        elif result.status is OverallStatus.PARTIAL_CHAT_ONLY:
            logger.warning("[standup] sheet failed, chat succeeded | error=%s", result.log.error)
        elif result.status is OverallStatus.PARTIAL_LOG_ONLY:
            logger.warning("[standup] chat failed, sheet succeeded | error=%s", result.chat.error)
        else:
            logger.info("[standup] submitted | name=%s", record.display_name)
        return result

    async def get_last_entry(self, email: str | None) -> Any:
        if _is_blank(email):
            raise MissingIdentity("Email parameter required")
        return await self._sheet.query_last_entry(email)

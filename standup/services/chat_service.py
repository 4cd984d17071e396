import logging
from datetime import date, datetime, timezone
from typing import Callable

import httpx

from standup.models.standup import SinkOutcome, StandupRecord, thread_key

logger = logging.getLogger(__name__)

CARD_ID = "standup-card"
CARD_ICON_URL = (
    "https://fonts.gstatic.com/s/i/short-term/release/googlesymbols/event_available/default/24px.svg"
)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _section(label: str, text: str) -> dict:
    return {"widgets": [{"decoratedText": {"topLabel": label, "text": text, "wrapText": True}}]}


class ChatService:
    def __init__(
        self,
        webhook_url: str | None,
        clock: Callable[[], date] = utc_today,
        timeout: float = 10.0,
    ) -> None:
        self._webhook_url = webhook_url
        self._clock = clock
        self._timeout = timeout

    def build_message(self, record: StandupRecord, day: date) -> dict:
        """
        Build the card payload for one stand-up.
        The thread key groups every submission made on `day` into one chat thread.
        """
        card = {
            "header": {
                "title": "Daily Stand-up Update",
                "subtitle": record.display_name,
                "imageUrl": CARD_ICON_URL,
                "imageType": "CIRCLE",
            },
            "sections": [
                _section("Yesterday's Progress", record.yesterday),
                _section("Today's Plan", record.today),
                _section("Blockers", record.blockers_text),
            ],
        }
        return {
            "cardsV2": [{"cardId": CARD_ID, "card": card}],
            "thread": {"threadKey": thread_key(day)},
        }

    async def post(self, record: StandupRecord) -> SinkOutcome:
        """Post the stand-up card to the webhook. Never raises."""
        if not self._webhook_url:
            logger.error("[chat] webhook URL not configured")
            return SinkOutcome.failed("Webhook not configured")

        message = self.build_message(record, self._clock())
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._webhook_url, json=message)
            if not response.is_success:
                logger.error(
                    "[chat] webhook rejected message | status=%s | body=%s",
                    response.status_code,
                    response.text,
                )
                return SinkOutcome.failed(f"Google Chat API error: {response.reason_phrase}")
        except Exception as exc:
            logger.error("[chat] webhook post failed | error=%s", exc)
            return SinkOutcome.failed(str(exc))

        logger.info("[chat] posted | name=%s | thread=%s", record.display_name, message["thread"]["threadKey"])
        return SinkOutcome.ok()

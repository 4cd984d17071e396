import logging
from typing import Any

import httpx

from standup.models.standup import LookupResult, SinkOutcome, StandupRecord

logger = logging.getLogger(__name__)

_DIAGNOSTIC_CHARS = 100


class InvalidSheetResponse(Exception):
    pass


def _parse_body(response: httpx.Response) -> dict:
    """Decode an Apps Script response body. Raises InvalidSheetResponse if it isn't a JSON object."""
    try:
        body = response.json()
    except ValueError as exc:
        raise InvalidSheetResponse(response.text[:_DIAGNOSTIC_CHARS]) from exc
    if not isinstance(body, dict):
        raise InvalidSheetResponse(response.text[:_DIAGNOSTIC_CHARS])
    return body


def _has_data(data: Any) -> bool:
    # Empty objects and row arrays still count as a previous entry; 0 == False here.
    return data not in (None, False, "")


class SheetService:
    """Client for the Apps Script web app that fronts the stand-up spreadsheet."""

    def __init__(self, api_url: str | None, timeout: float = 10.0) -> None:
        self._api_url = api_url
        self._timeout = timeout

    async def append(self, record: StandupRecord) -> SinkOutcome:
        """Append one row to the sheet. Never raises."""
        if not self._api_url:
            logger.error("[sheet] Apps Script URL not configured")
            return SinkOutcome.failed("Apps Script not configured")

        try:
            # Apps Script answers a POST with a redirect to the result page.
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.post(self._api_url, json=record.as_log_row())
            body = _parse_body(response)
        except InvalidSheetResponse as exc:
            logger.error("[sheet] invalid JSON from Apps Script | body=%s", exc)
            return SinkOutcome.failed("Invalid JSON response from Apps Script")
        except Exception as exc:
            logger.error("[sheet] append failed | error=%s", exc)
            return SinkOutcome.failed(str(exc))

        if not body.get("success"):
            error = body.get("error") or "Unknown Apps Script error"
            logger.error("[sheet] Apps Script reported failure | error=%s", error)
            return SinkOutcome.failed(str(error))

        logger.info("[sheet] appended | email=%s", record.email)
        return SinkOutcome.ok()

    async def lookup_last_entry(self, email: str) -> LookupResult:
        """Fetch the most recent row for `email`, keeping absence and failure apart."""
        if not self._api_url:
            return LookupResult(error="Apps Script not configured")

        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(self._api_url, params={"email": email})
            body = _parse_body(response)
        except InvalidSheetResponse as exc:
            logger.warning("[sheet] invalid JSON on lookup | email=%s | body=%s", email, exc)
            return LookupResult(error="Invalid JSON response from Apps Script")
        except Exception as exc:
            logger.warning("[sheet] lookup failed | email=%s | error=%s", email, exc)
            return LookupResult(error=str(exc))

        data = body.get("data")
        if body.get("success") and _has_data(data):
            return LookupResult(data=data)
        return LookupResult()

    async def query_last_entry(self, email: str) -> Any:
        """Most recent row for `email`, or None. Failures are logged and read as absence."""
        result = await self.lookup_last_entry(email)
        if result.failed:
            logger.info("[sheet] last entry unavailable | email=%s | error=%s", email, result.error)
        return result.data if result.found else None

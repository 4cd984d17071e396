import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from standup.models.standup import StandupRecord
from standup.services.sheet_service import SheetService

API_URL = "https://script.example.com/macros/s/abc/exec"


@pytest.fixture
def svc():
    return SheetService(API_URL)


@pytest.fixture
def record():
    return StandupRecord(name="Ada", email="ada@x.com", yesterday="Fixed bug", today="Write tests")


def _json_response(body) -> MagicMock:
    mock_response = MagicMock()
    mock_response.json.return_value = body
    mock_response.text = json.dumps(body)
    return mock_response


def _text_response(text: str) -> MagicMock:
    mock_response = MagicMock()
    mock_response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    mock_response.text = text
    return mock_response


def _mock_client(method: str, **kwargs):
    """Patch httpx.AsyncClient in the sheet module; returns (patcher, client class mock, client mock)."""
    mock_client = AsyncMock()
    setattr(mock_client, method, AsyncMock(**kwargs))
    patcher = patch("standup.services.sheet_service.httpx.AsyncClient")
    mock_client_cls = patcher.start()
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return patcher, mock_client_cls, mock_client


@pytest.mark.asyncio
async def test_append_success_posts_full_row(svc, record):
    patcher, mock_client_cls, mock_client = _mock_client("post", return_value=_json_response({"success": True}))
    try:
        outcome = await svc.append(record)
    finally:
        patcher.stop()

    assert outcome.succeeded
    assert mock_client_cls.call_args.kwargs["follow_redirects"] is True
    args, kwargs = mock_client.post.call_args
    assert args[0] == API_URL
    assert kwargs["json"] == {
        "name": "Ada",
        "email": "ada@x.com",
        "yesterday": "Fixed bug",
        "today": "Write tests",
        "blockers": "",
    }


@pytest.mark.asyncio
async def test_append_without_url_makes_no_call(record):
    with patch("standup.services.sheet_service.httpx.AsyncClient") as mock_client_cls:
        outcome = await SheetService(None).append(record)
    assert outcome.error == "Apps Script not configured"
    mock_client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_append_invalid_json(svc, record):
    patcher, _, _ = _mock_client("post", return_value=_text_response("<html>Sign in</html>"))
    try:
        outcome = await svc.append(record)
    finally:
        patcher.stop()

    assert not outcome.succeeded
    assert outcome.error == "Invalid JSON response from Apps Script"


@pytest.mark.asyncio
async def test_append_service_reported_error(svc, record):
    body = {"success": False, "error": "Sheet is protected"}
    patcher, _, _ = _mock_client("post", return_value=_json_response(body))
    try:
        outcome = await svc.append(record)
    finally:
        patcher.stop()

    assert outcome.error == "Sheet is protected"


@pytest.mark.asyncio
async def test_append_connection_error(svc, record):
    patcher, _, _ = _mock_client("post", side_effect=httpx.ConnectError("connection refused"))
    try:
        outcome = await svc.append(record)
    finally:
        patcher.stop()

    assert not outcome.succeeded
    assert outcome.error == "connection refused"


@pytest.mark.asyncio
async def test_query_last_entry_found(svc):
    entry = {"yesterday": "Fixed bug", "today": "Write tests", "timestamp": "2026-10-18T09:00:00Z"}
    patcher, _, mock_client = _mock_client("get", return_value=_json_response({"success": True, "data": entry}))
    try:
        result = await svc.query_last_entry("ada@x.com")
    finally:
        patcher.stop()

    assert result == entry
    args, kwargs = mock_client.get.call_args
    assert args[0] == API_URL
    assert kwargs["params"] == {"email": "ada@x.com"}


@pytest.mark.asyncio
async def test_query_last_entry_absent(svc):
    patcher, _, _ = _mock_client("get", return_value=_json_response({"success": True, "data": None}))
    try:
        result = await svc.query_last_entry("nobody@x.com")
    finally:
        patcher.stop()
    assert result is None


@pytest.mark.asyncio
async def test_query_last_entry_swallows_failures(svc):
    patcher, _, _ = _mock_client("get", side_effect=httpx.TimeoutException("timed out"))
    try:
        result = await svc.query_last_entry("ada@x.com")
    finally:
        patcher.stop()
    assert result is None


@pytest.mark.asyncio
async def test_lookup_distinguishes_failure_from_absence(svc):
    patcher, _, _ = _mock_client("get", return_value=_text_response("oops"))
    try:
        failed = await svc.lookup_last_entry("ada@x.com")
    finally:
        patcher.stop()

    patcher, _, _ = _mock_client("get", return_value=_json_response({"success": False}))
    try:
        absent = await svc.lookup_last_entry("ada@x.com")
    finally:
        patcher.stop()

    assert failed.failed and not failed.found
    assert not absent.failed and not absent.found


@pytest.mark.asyncio
async def test_query_without_url_returns_none():
    with patch("standup.services.sheet_service.httpx.AsyncClient") as mock_client_cls:
        result = await SheetService("").query_last_entry("ada@x.com")
    assert result is None
    mock_client_cls.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("row", [{}, [], "Fixed bug", ["Ada", "Fixed bug"]])
async def test_lookup_treats_empty_object_and_rows_as_found(svc, row):
    patcher, _, _ = _mock_client("get", return_value=_json_response({"success": True, "data": row}))
    try:
        result = await svc.lookup_last_entry("ada@x.com")
    finally:
        patcher.stop()
    assert result.found
    assert result.data == row


@pytest.mark.asyncio
@pytest.mark.parametrize("row", [None, "", 0, False])
async def test_query_last_entry_falsy_data_is_absent(svc, row):
    patcher, _, _ = _mock_client("get", return_value=_json_response({"success": True, "data": row}))
    try:
        result = await svc.query_last_entry("ada@x.com")
    finally:
        patcher.stop()
    assert result is None

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from standup.models.standup import OverallStatus
from standup.schemas.standup import (
    ErrorResponse,
    LastEntryResponse,
    SinkErrors,
    SinkStatus,
    StandupFailureResponse,
    StandupRequest,
    StandupResponse,
)
from standup.services.standup_service import InvalidSubmission, MissingIdentity

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(exc: Exception) -> JSONResponse:
    body = ErrorResponse(message="Internal Server Error", error=type(exc).__name__)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/standup")
async def submit_standup(payload: StandupRequest, request: Request) -> JSONResponse:
    standup_service = request.app.state.standup_service

    try:
        result = await standup_service.submit(payload)
    except InvalidSubmission as exc:
        logger.info("[standup] rejected | reason=%s", exc)
        return JSONResponse(status_code=400, content=ErrorResponse(message=str(exc)).model_dump(exclude_none=True))
    except Exception as exc:
        logger.exception("[standup] unexpected error processing stand-up")
        return _internal_error(exc)

    if not result.any_succeeded:
        body = StandupFailureResponse(
            message="Failed to send to both Google Chat and Sheet",
            errors=SinkErrors(chat=result.chat.error, sheet=result.log.error),
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    message = (
        "Stand-up submitted successfully!"
        if result.status is OverallStatus.FULL_SUCCESS
        else "Stand-up partially submitted"
    )
    body = StandupResponse(
        message=message,
        chat=SinkStatus.from_outcome(result.chat),
        sheet=SinkStatus.from_outcome(result.log),
    )
    return JSONResponse(status_code=200, content=body.model_dump(exclude_none=True))


@router.get("/standup")
async def last_standup(request: Request, email: str | None = None) -> JSONResponse:
    standup_service = request.app.state.standup_service

    try:
        entry = await standup_service.get_last_entry(email)
        if entry is None:
            body = LastEntryResponse(message="No previous entries found", data=None)
        else:
            body = LastEntryResponse(message="Last entry retrieved", data=entry)
        content = body.model_dump()
    except MissingIdentity as exc:
        return JSONResponse(status_code=400, content=ErrorResponse(message=str(exc)).model_dump(exclude_none=True))
    except Exception as exc:
        logger.exception("[standup] unexpected error retrieving last entry | email=%s", email)
        return _internal_error(exc)

    return JSONResponse(status_code=200, content=content)

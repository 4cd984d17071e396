import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from standup.api.routes import router
from standup.config import settings
from standup.services.chat_service import ChatService
from standup.services.sheet_service import SheetService
from standup.services.standup_service import StandupService


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info(
        "Stand-up relay starting | port=%s | chat=%s | sheet=%s",
        settings.PORT,
        "enabled" if settings.GOOGLE_CHAT_WEBHOOK_URL else "disabled",
        "enabled" if settings.APPS_SCRIPT_WEB_APP_URL else "disabled",
    )
    chat = ChatService(settings.GOOGLE_CHAT_WEBHOOK_URL, timeout=settings.HTTP_TIMEOUT)
    sheet = SheetService(settings.APPS_SCRIPT_WEB_APP_URL, timeout=settings.HTTP_TIMEOUT)
    app.state.standup_service = StandupService(chat, sheet)
    yield
    logger.info("Stand-up relay shutting down")


def create_app() -> FastAPI:
    app = FastAPI(title="Stand-up Relay", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logging.getLogger(__name__).info("Rejected malformed request | path=%s", request.url.path)
        return JSONResponse(status_code=400, content={"message": "Malformed request body"})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger(__name__).exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal Server Error", "error": type(exc).__name__},
        )

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("standup.main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL)

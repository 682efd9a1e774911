from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WineQrError(Exception):
    """Base class for label generation failures."""


class VocabularyError(WineQrError, ValueError):
    """An attribute is outside its controlled vocabulary."""


class AnnotationError(WineQrError):
    """An external raster tool step failed."""

    def __init__(self, message: str, *, step: int, command: list[str] | None = None):
        super().__init__(message)
        self.step = step
        self.command = command or []


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(VocabularyError)
    async def vocabulary_exception_handler(request: Request, exc: VocabularyError):
        request_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "code": "vocabulary_error",
                    "message": str(exc),
                    "request_id": request_id,
                }
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "code": "validation_error",
                    "message": "Invalid request payload.",
                    "request_id": request_id,
                }
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        request_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": "http_error",
                    "message": str(exc.detail),
                    "request_id": request_id,
                }
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled server error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "internal_server_error",
                    "message": "Unexpected server error. Contact support with request_id.",
                    "request_id": request_id,
                }
            },
        )

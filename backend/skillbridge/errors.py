# backend/skillbridge/errors.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = "Server configuration error: API Key missing"


class SkillBridgeError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class BadInput(SkillBridgeError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ConfigurationError(SkillBridgeError):
    message = CONFIG_ERROR_MESSAGE


class UpstreamModelError(SkillBridgeError):
    """The model API could not be reached or answered with an error status."""
    message = "Model request failed"


class ModelResponseError(SkillBridgeError):
    """The model answered, but not with JSON of the expected shape."""
    message = "Failed to parse model response"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first: dict[str, Any] = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc) or "body"
    if first.get("type") in ("missing", "string_too_short"):
        return f"{field} is required"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SkillBridgeError)
    async def _skillbridge_error(request: Request, exc: SkillBridgeError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(SQLAlchemyError)
    async def _db_error(request: Request, exc: SQLAlchemyError):
        log.exception("Database error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

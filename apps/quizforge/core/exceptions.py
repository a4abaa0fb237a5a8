from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


def _error_payload(
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        payload["details"] = details
    return payload


class QuizForgeException(Exception):
    """Base exception for QuizForge.

    Note: these exceptions are raised from service functions and translated by
    the handlers registered in `register_exception_handlers`. Code outside a
    request (scripts, tests) can catch them directly.
    """

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)


class ConfigurationError(QuizForgeException):
    """Raised when model credentials or endpoint settings are missing/invalid."""

    status_code = 500
    default_code = "configuration_error"


class UpstreamError(QuizForgeException):
    """Raised when the model (or another upstream) call fails after retries."""

    status_code = 502
    default_code = "upstream_error"


class ParseError(QuizForgeException):
    """Raised when no question can be recovered from the model output.

    `raw_text` keeps the unwrapped reply for diagnostics.
    """

    status_code = 502
    default_code = "parse_error"

    def __init__(self, message: str, *, raw_text: str = "", **kwargs: Any) -> None:
        self.raw_text = raw_text
        kwargs.setdefault("details", {"raw_text": raw_text[:500]})
        super().__init__(message, **kwargs)


class ValidationError(QuizForgeException):
    """Raised when a submission references an unknown question or option."""

    status_code = 422
    default_code = "validation_error"


class NotFoundError(QuizForgeException):
    """Raised when a quiz does not exist in the store."""

    status_code = 404
    default_code = "not_found"


def register_exception_handlers(app: FastAPI) -> None:
    """Register QuizForge's exception handlers on a FastAPI app."""

    @app.exception_handler(QuizForgeException)
    async def _quizforge_exception_handler(
        _request: Request, exc: QuizForgeException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=exc.message,
                code=exc.code,
                type_=exc.__class__.__name__,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_payload(
                error="Validation error",
                code="validation_error",
                type_=exc.__class__.__name__,
                details=exc.errors(),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = getattr(exc, "detail", None)
        if isinstance(detail, str):
            error = detail
            details = None
        else:
            error = "Request failed"
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=error,
                code="http_exception",
                type_=exc.__class__.__name__,
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_payload(
                error="Internal server error",
                code="internal_error",
                type_="InternalServerError",
            ),
        )

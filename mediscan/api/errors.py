from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediscan.domain.exceptions import DomainError


logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def _error_response(request: Request, status_code: int, message: str, detail: Any = None) -> JSONResponse:
    settings = request.app.state.context.settings
    error: dict[str, Any] = {}
    if settings.is_development:
        error = {"statusCode": status_code, "detail": detail if detail is not None else message}
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )


def _log(request: Request, status_code: int, message: str, exc: Exception | None = None) -> None:
    if status_code >= 500:
        logger.error(
            "api: request_failed method=%s path=%s status=%s message=%s",
            request.method,
            request.url.path,
            status_code,
            message,
            exc_info=exc,
        )
    else:
        logger.warning(
            "api: request_rejected method=%s path=%s status=%s message=%s",
            request.method,
            request.url.path,
            status_code,
            message,
        )


def _validation_detail(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        _log(request, exc.status_code, exc.message, exc if exc.status_code >= 500 else None)
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else GENERIC_ERROR_MESSAGE
        _log(request, exc.status_code, message)
        response = _error_response(request, exc.status_code, message, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        detail = _validation_detail(exc)
        fields = ", ".join(".".join(item["loc"][1:]) or item["loc"][0] for item in detail if item["loc"])
        message = f"Invalid request: {fields}" if fields else "Invalid request"
        _log(request, 400, message)
        return _error_response(request, 400, message, detail)

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        _log(request, 500, f"{type(exc).__name__}: {exc}", exc)
        return _error_response(request, 500, GENERIC_ERROR_MESSAGE)

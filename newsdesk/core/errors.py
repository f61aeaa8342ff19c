"""Exception handlers producing ``{code, message, data: null, details}`` bodies."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from newsdesk.services.date_ranges import InvalidDateRange

logger = logging.getLogger(__name__)

STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    413: "payload_too_large",
    422: "validation_error",
    429: "rate_limited",
}


def error_response(
    status_code: int,
    message: str | None = None,
    *,
    code: str | None = None,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    if message is None:
        try:
            message = HTTPStatus(status_code).phrase
        except ValueError:
            message = "Request failed"
    if details is None:
        details = {}
    elif not isinstance(details, dict):
        details = {"errors": details} if isinstance(details, list) else {"detail": str(details)}
    body = {
        "code": code or STATUS_CODES.get(status_code, "http_error"),
        "message": message,
        "data": None,
        "details": details,
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            exc.status_code,
            detail.get("message"),
            code=detail.get("code"),
            details=detail.get("details"),
            headers=exc.headers,
        )
    if isinstance(detail, str):
        return error_response(exc.status_code, detail, details={"detail": detail}, headers=exc.headers)
    return error_response(exc.status_code, details=detail, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Validation failed"
    if errors:
        first = errors[0]
        # Location without the request section (body/query/path/form)
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in {"body", "query", "path", "form"})
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg") or message)
    return error_response(422, message, details={"errors": errors})


async def invalid_range_handler(request: Request, exc: InvalidDateRange) -> JSONResponse:
    return error_response(400, str(exc), code="invalid_range")


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(503, "Announcement store unavailable", code="store_unavailable")


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    headers = getattr(exc, "headers", None)
    return error_response(
        429,
        details=getattr(exc, "detail", None),
        headers=headers if isinstance(headers, dict) else None,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error", code="internal_server_error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(InvalidDateRange, invalid_range_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

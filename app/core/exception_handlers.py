"""
Exception handlers that turn every failure into the ``{"detail", "code"}``
error body the frontend and the browser extension understand.
"""

import logging
import uuid
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

STATUS_TO_CODE = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.AUTH_NOT_AUTHENTICATED,
    403: ErrorCode.AUTHZ_FORBIDDEN,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    405: ErrorCode.BAD_REQUEST,
    409: ErrorCode.RESOURCE_CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    503: ErrorCode.SERVER_UNAVAILABLE,
}


def generate_request_id() -> str:
    """Short id that ties a client-visible error to its log line"""
    return str(uuid.uuid4())[:8]


def _request_id(request: Request) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or generate_request_id()


def _json_error(
    status_code: int,
    body: dict[str, Any],
    request_id: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={REQUEST_ID_HEADER: request_id, **(headers or {})},
    )


def error_response(exc: AppException, request_id: str | None = None) -> JSONResponse:
    """Render an AppException; also used by middleware that runs outside the handlers."""
    headers = {}
    retry_after = exc.metadata.get("retry_after")
    if retry_after is not None:
        headers["Retry-After"] = str(retry_after)
    return _json_error(
        exc.status_code,
        exc.to_dict(),
        request_id or generate_request_id(),
        headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    request_id = _request_id(request)

    # Upstream failures are worth a louder log line than client mistakes
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s: %s (code=%s, status=%d, request_id=%s, path=%s)",
        type(exc).__name__,
        exc.message,
        exc.code.value,
        exc.status_code,
        request_id,
        request.url.path,
    )

    return error_response(exc, request_id)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic validation errors, one entry per offending field."""
    request_id = _request_id(request)
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]

    logger.warning(
        "Invalid request body (request_id=%s, path=%s): %s",
        request_id,
        request.url.path,
        errors,
    )

    return _json_error(
        422,
        {"detail": errors, "code": ErrorCode.VALIDATION_ERROR.value},
        request_id,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing errors from Starlette (unknown path, wrong method) in our format."""
    request_id = _request_id(request)
    error_code = STATUS_TO_CODE.get(exc.status_code, ErrorCode.SERVER_ERROR)

    logger.info(
        "HTTP %d on %s (request_id=%s): %s",
        exc.status_code,
        request.url.path,
        request_id,
        exc.detail,
    )

    return _json_error(
        exc.status_code,
        {"detail": exc.detail or "An error occurred", "code": error_code.value},
        request_id,
        dict(exc.headers) if exc.headers else None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)

    logger.exception(
        "Unhandled exception (request_id=%s, path=%s): %s",
        request_id,
        request.url.path,
        exc,
    )

    return _json_error(
        500,
        {
            "detail": "Internal server error. Please try again later.",
            "code": ErrorCode.SERVER_ERROR.value,
        },
        request_id,
    )

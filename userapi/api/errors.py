"""Uniform error bodies.

Every failure leaves the service as `{"error": "<message>"}` with a status
in 400/404/405/500.  Routes raise HTTPException with the message as
`detail`; the handlers below only reshape the body.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userapi.core.errors import UNKNOWN_ERROR, error_message, status_for

logger = logging.getLogger(__name__)

INVALID_BODY = "Invalid request body"


def to_http_error(exc: Exception, action: str) -> HTTPException:
    """Map a service failure to an HTTPException and log it.

    Call from inside the `except` block so server errors keep their traceback.
    """
    code = status_for(exc)
    message = error_message(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception("Failed to %s: %s", action, message)
    else:
        logger.warning("Could not %s: %s", action, message)
    return HTTPException(status_code=code, detail=message)


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) and exc.detail else UNKNOWN_ERROR
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=exc.headers,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        "Malformed request body %s %s: %d error(s)",
        request.method,
        request.url.path,
        len(exc.errors()),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": INVALID_BODY},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]

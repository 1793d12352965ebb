"""
Exception handlers for the Portfolio Mirror API

Every failure leaves the API as an ErrorResponse body carrying the request
id the logging middleware assigned, so a client report can be matched to
the server log line.
"""

import logging
import os
import traceback
from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import PortfolioMirrorException
from .models.error_models import ErrorDetail, ErrorResponseBuilder

logger = logging.getLogger(__name__)

# Body fields whose validation failures are reported as INVALID_PORTFOLIO
PORTFOLIO_FIELDS = {"portfolio"}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "RESOURCE_NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    429: "RATE_LIMIT_EXCEEDED",
    502: "EXTERNAL_SERVICE_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def get_request_id(request: Request) -> str:
    """Request ID assigned by the logging middleware, else from headers, else generated."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return request.headers.get("X-Request-ID", f"req_{id(request)}")


def _render(status_code: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def portfolio_mirror_exception_handler(request: Request, exc: PortfolioMirrorException) -> JSONResponse:
    """Render one of our own exceptions with its code, status and details."""
    request_id = get_request_id(request)
    path = request.url.path

    logger.warning(
        f"{exc.error_code} on {path}: {exc.message}",
        extra={"request_id": request_id, "path": path, "status_code": exc.status_code}
    )

    return _render(exc.status_code, ErrorResponseBuilder.build(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=path,
        request_id=request_id,
        details=exc.details
    ))


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """
    Pydantic failures become 400s with one ErrorDetail per failing field.

    Anything wrong under ``portfolio`` (missing, not a list, a bad holding)
    is reported as INVALID_PORTFOLIO; everything else as VALIDATION_ERROR.
    """
    request_id = get_request_id(request)
    path = request.url.path

    field_errors = []
    portfolio_invalid = False
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        portfolio_invalid = portfolio_invalid or bool(PORTFOLIO_FIELDS.intersection(loc))
        field_errors.append(ErrorDetail(field=".".join(loc), message=error["msg"], type=error["type"]))

    logger.warning(
        f"Rejected request body on {path}: {len(field_errors)} field error(s)",
        extra={"request_id": request_id, "path": path, "status_code": 400}
    )

    body = ErrorResponseBuilder.build_validation_error(
        message="Invalid portfolio" if portfolio_invalid else "Request validation failed",
        validation_errors=field_errors,
        path=path,
        request_id=request_id
    )
    if portfolio_invalid:
        body.error = "INVALID_PORTFOLIO"
    return _render(status.HTTP_400_BAD_REQUEST, body)


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """slowapi limit hit: 429 with Retry-After when the limiter knows it."""
    request_id = get_request_id(request)
    retry_after = int(exc.retry_after) if getattr(exc, "retry_after", None) else None
    limit = getattr(exc, "detail", None) or "Rate limit exceeded"

    logger.warning(
        f"Rate limit exceeded on {request.url.path}: {limit}",
        extra={"request_id": request_id, "path": request.url.path, "status_code": 429}
    )

    response = _render(status.HTTP_429_TOO_MANY_REQUESTS, ErrorResponseBuilder.build_rate_limit_error(
        limit=limit,
        retry_after=retry_after,
        path=request.url.path,
        request_id=request_id
    ))
    if retry_after:
        response.headers["Retry-After"] = str(retry_after)
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (404, 405) and explicit HTTPExceptions."""
    request_id = get_request_id(request)
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "INTERNAL_ERROR")

    logger.info(
        f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}",
        extra={"request_id": request_id, "path": request.url.path, "status_code": exc.status_code}
    )

    return _render(exc.status_code, ErrorResponseBuilder.build(
        error_code=error_code,
        message=str(exc.detail),
        status_code=exc.status_code,
        path=request.url.path,
        request_id=request_id
    ))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort for anything unexpected.

    The exception text and traceback are only exposed when ENVIRONMENT is
    development.
    """
    request_id = get_request_id(request)
    error_type = type(exc).__name__

    logger.error(
        f"Unhandled {error_type} on {request.url.path}: {exc}",
        exc_info=True,
        extra={"request_id": request_id, "path": request.url.path, "status_code": 500}
    )

    message = "An internal server error occurred"
    details = {"error_type": error_type}
    if os.getenv("ENVIRONMENT", "production") == "development":
        message = f"Internal error: {exc}"
        details["traceback"] = traceback.format_exc()

    return _render(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponseBuilder.build(
        error_code="INTERNAL_ERROR",
        message=message,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=request.url.path,
        request_id=request_id,
        details=details
    ))


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler above on the application."""
    handlers = [
        (PortfolioMirrorException, portfolio_mirror_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (PydanticValidationError, validation_exception_handler),
        (RateLimitExceeded, rate_limit_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (Exception, generic_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)

    logger.debug(f"Registered {len(handlers)} exception handlers")

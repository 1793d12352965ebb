"""
Error body models.

Every non-2xx response from the API is one of these; error_handlers.py is
the only producer.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ErrorDetail(BaseModel):
    """One failing field of a rejected request body."""

    field: Optional[str] = Field(None, description="Dotted location, e.g. body.portfolio.0.percentage")
    message: str
    type: Optional[str] = Field(None, description="Pydantic error type")


class ErrorResponse(BaseModel):
    """Common error body."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": "INVALID_PORTFOLIO",
            "message": "Invalid portfolio: portfolio must contain at least one holding",
            "status_code": 400,
            "timestamp": "2026-01-25T12:34:56.789000+00:00",
            "path": "/api/v1/portfolio/mirror",
            "request_id": "3f1c2a9e-8d1b-4c55-9a0e-1f2b3c4d5e6f",
            "details": {"holding_count": 0}
        }
    })

    error: str = Field(..., description="Machine-readable code, see exceptions.ERROR_CODES")
    message: str
    status_code: int
    timestamp: str = Field(default_factory=_utc_now_iso)
    path: Optional[str] = None
    request_id: Optional[str] = Field(None, description="Matches the X-Request-ID response header")
    details: Optional[Dict[str, Any]] = None


class ValidationErrorResponse(ErrorResponse):
    """400 for a body that failed schema validation."""

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": "INVALID_PORTFOLIO",
            "message": "Invalid portfolio",
            "status_code": 400,
            "timestamp": "2026-01-25T12:34:56.789000+00:00",
            "path": "/api/v1/portfolio/warnings",
            "validation_errors": [
                {"field": "body.portfolio", "message": "Field required", "type": "missing"}
            ]
        }
    })

    error: str = "VALIDATION_ERROR"
    validation_errors: List[ErrorDetail] = Field(default_factory=list)


class RateLimitErrorResponse(ErrorResponse):
    """429 from slowapi."""

    error: str = "RATE_LIMIT_EXCEEDED"
    retry_after: Optional[int] = Field(None, description="Seconds until the window resets")
    limit: Optional[str] = None


class ErrorResponseBuilder:
    """Factories used by the exception handlers."""

    @staticmethod
    def build(
        error_code: str,
        message: str,
        status_code: int,
        path: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> ErrorResponse:
        return ErrorResponse(
            error=error_code,
            message=message,
            status_code=status_code,
            path=path,
            request_id=request_id,
            details=details,
        )

    @staticmethod
    def build_validation_error(
        message: str,
        validation_errors: List[ErrorDetail],
        path: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> ValidationErrorResponse:
        return ValidationErrorResponse(
            message=message,
            status_code=400,
            path=path,
            request_id=request_id,
            validation_errors=validation_errors,
        )

    @staticmethod
    def build_rate_limit_error(
        limit: str,
        retry_after: Optional[int] = None,
        path: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> RateLimitErrorResponse:
        message = f"Rate limit exceeded: {limit}"
        if retry_after:
            message = f"{message}. Retry after {retry_after} seconds"
        return RateLimitErrorResponse(
            message=message,
            status_code=429,
            path=path,
            request_id=request_id,
            retry_after=retry_after,
            limit=limit,
        )

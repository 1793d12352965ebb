"""
Exceptions raised by Portfolio Mirror

Every error the API can report derives from PortfolioMirrorException and
carries a machine-readable code and an HTTP status. Subclasses pin the code
and status as class attributes; the handlers in error_handlers.py render
them as ErrorResponse bodies.

    PortfolioMirrorException (500, INTERNAL_ERROR)
    ├── ValidationError (400, VALIDATION_ERROR)
    │   ├── InvalidTickerError
    │   ├── InvalidParameterError
    │   └── InvalidPortfolioError (INVALID_PORTFOLIO)
    │       └── EmptyPortfolioError
    └── ExternalServiceError (502, EXTERNAL_SERVICE_ERROR)
        ├── MarketDataError
        ├── ChatServiceError
        └── DatabaseError

Quote and chat failures are recovered inside their services (fallback
quote, fallback reply), so only validation and storage errors normally
reach a client.
"""

from typing import Any, Dict, Optional


class PortfolioMirrorException(Exception):
    """Base class for all Portfolio Mirror errors."""

    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


# ---------------------------------------------------------------------------
# Bad input (400)
# ---------------------------------------------------------------------------

class ValidationError(PortfolioMirrorException):
    """Request data failed validation."""

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str = "Validation error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidTickerError(ValidationError):
    """Ticker symbol is empty, too long or has characters outside the allowed set."""

    def __init__(self, ticker: str, reason: Optional[str] = None):
        message = f"Invalid ticker symbol: {ticker}"
        if reason:
            message = f"{message} - {reason}"
        super().__init__(message, details={"ticker": ticker, "reason": reason})


class InvalidParameterError(ValidationError):
    """A scalar request parameter (client id, limit, ...) is out of range."""

    def __init__(self, parameter: str, value: Any, reason: str):
        super().__init__(
            f"Invalid parameter '{parameter}': {reason}",
            details={"parameter": parameter, "value": str(value), "reason": reason}
        )


class InvalidPortfolioError(ValidationError):
    """Submitted portfolio is missing, not a list, or has no holdings."""

    error_code = "INVALID_PORTFOLIO"

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Invalid portfolio: {reason}", details=details)


class EmptyPortfolioError(InvalidPortfolioError):
    """Metrics were requested for zero holdings."""

    def __init__(self):
        super().__init__("portfolio must contain at least one holding", details={"holding_count": 0})


# ---------------------------------------------------------------------------
# Upstream failures (502)
# ---------------------------------------------------------------------------

class ExternalServiceError(PortfolioMirrorException):
    """A quote provider, the text generator or the database failed."""

    error_code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502

    def __init__(
        self,
        service: str,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {"service": service}
        if original_error is not None:
            details["original_error"] = str(original_error)
        super().__init__(message or f"External service error: {service}", details=details)


class MarketDataError(ExternalServiceError):
    """No usable quote could be built for a ticker."""

    def __init__(
        self,
        ticker: str,
        provider: str = "yfinance",
        original_error: Optional[Exception] = None,
        message: Optional[str] = None
    ):
        super().__init__(
            provider,
            message=message or f"Failed to fetch market data for {ticker}",
            original_error=original_error
        )
        self.details["ticker"] = ticker


class ChatServiceError(ExternalServiceError):
    """The generative-text provider failed or returned nothing."""

    def __init__(
        self,
        message: Optional[str] = None,
        provider: str = "gemini",
        original_error: Optional[Exception] = None
    ):
        super().__init__(provider, message=message or "Text generation failed", original_error=original_error)


class DatabaseError(ExternalServiceError):
    """The usage store could not complete an operation."""

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        super().__init__(
            "database",
            message=f"Database operation failed: {operation}",
            original_error=original_error
        )


# ---------------------------------------------------------------------------
# Code registry, surfaced in the OpenAPI docs and used by the handlers
# ---------------------------------------------------------------------------

ERROR_CODES = {
    "VALIDATION_ERROR": {
        "description": "Input validation failed",
        "status_code": 400,
        "user_action": "Check request parameters and try again"
    },
    "INVALID_PORTFOLIO": {
        "description": "Portfolio is missing, malformed or empty",
        "status_code": 400,
        "user_action": "Submit a non-empty list of ticker/percentage entries"
    },
    "RESOURCE_NOT_FOUND": {
        "description": "Requested route not found",
        "status_code": 404,
        "user_action": "Check the URL"
    },
    "RATE_LIMIT_EXCEEDED": {
        "description": "Too many requests from this client",
        "status_code": 429,
        "user_action": "Wait for the Retry-After interval"
    },
    "INTERNAL_ERROR": {
        "description": "Internal server error",
        "status_code": 500,
        "user_action": "Retry later; report the request_id if it persists"
    },
    "EXTERNAL_SERVICE_ERROR": {
        "description": "Usage store or another upstream service failed",
        "status_code": 502,
        "user_action": "Retry request"
    },
}


def get_error_info(error_code: str) -> Dict[str, Any]:
    """Registry entry for a code, INTERNAL_ERROR's entry when unknown."""
    return ERROR_CODES.get(error_code, ERROR_CODES["INTERNAL_ERROR"])

"""
OpenAPI error documentation for the v1 routes.

Each route passes the profile matching the failures it can produce as
``responses=``, so the generated docs list the ErrorResponse shapes a
client should expect.
"""

from ...models.error_models import (
    ErrorResponse,
    RateLimitErrorResponse,
    ValidationErrorResponse,
)


def _doc(model, description):
    return {"model": model, "description": description}


_RATE_LIMITED = {429: _doc(RateLimitErrorResponse, "Too many requests from this client")}
_INTERNAL = {500: _doc(ErrorResponse, "Unexpected server error")}

# Portfolio routes: bad body → INVALID_PORTFOLIO. Quote failures never surface.
PORTFOLIO_ERRORS = {
    400: _doc(ValidationErrorResponse, "Portfolio missing, not a list, empty, or a holding is malformed"),
    **_RATE_LIMITED,
    **_INTERNAL,
}

# Chat: only an empty or oversized question is rejected; provider errors become the fallback reply.
CHAT_ERRORS = {
    400: _doc(ValidationErrorResponse, "Question empty or too long"),
    **_RATE_LIMITED,
    **_INTERNAL,
}

QUOTE_ERRORS = {
    400: _doc(ErrorResponse, "Ticker symbol rejected"),
    **_RATE_LIMITED,
    **_INTERNAL,
}

# Usage routes touch the database, so storage failures can reach the client.
USAGE_ERRORS = {
    400: _doc(ErrorResponse, "Invalid client id or limit"),
    **_RATE_LIMITED,
    **_INTERNAL,
    502: _doc(ErrorResponse, "Usage store unavailable"),
}

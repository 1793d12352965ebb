"""
Input Validators and Sanitizers

Validation and normalization for tickers, allocation percentages,
client identifiers and whole portfolios.
"""

import logging
import math
import re
from typing import Any, List, Optional

from ..exceptions import InvalidParameterError, InvalidPortfolioError, InvalidTickerError

logger = logging.getLogger(__name__)

TICKER_MAX_LENGTH = 15
TICKER_PATTERN = re.compile(r'^[A-Z0-9.\-^&]+$')
CLIENT_ID_PATTERN = re.compile(r'^[A-Za-z0-9_\-.:]{1,100}$')


# ============================================================================
# TICKER VALIDATION
# ============================================================================

def validate_ticker(ticker: str) -> str:
    """
    Validate stock ticker symbol

    Args:
        ticker: Ticker symbol to validate

    Returns:
        Validated and normalized ticker (uppercase, stripped)

    Raises:
        InvalidTickerError: If ticker is invalid

    Valid formats:
        - 1-15 uppercase letters/numbers
        - May contain dots, hyphens, carets or ampersands
        - Examples: TCS, RELIANCE.NS, BRK-B, M&M
    """
    if not ticker or not isinstance(ticker, str):
        raise InvalidTickerError(
            ticker=str(ticker) if ticker else "empty",
            reason="Ticker symbol is required and must be a string"
        )

    ticker = ticker.strip().upper()

    if len(ticker) < 1 or len(ticker) > TICKER_MAX_LENGTH:
        raise InvalidTickerError(
            ticker=ticker,
            reason=f"Ticker symbol must be 1-{TICKER_MAX_LENGTH} characters"
        )

    if not TICKER_PATTERN.match(ticker):
        raise InvalidTickerError(
            ticker=ticker,
            reason="Ticker symbol can only contain letters, numbers, dots, hyphens, carets and ampersands"
        )

    if '..' in ticker:
        raise InvalidTickerError(
            ticker=ticker,
            reason="Invalid ticker symbol format"
        )

    return ticker


# ============================================================================
# NUMERIC VALIDATION
# ============================================================================

def validate_percentage(percentage: Any, min_val: float = 0, max_val: Optional[float] = None) -> float:
    """
    Validate an allocation percentage

    Args:
        percentage: Percentage to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value (None = no upper bound)

    Returns:
        Validated percentage as float

    Raises:
        ValueError: If percentage is not a finite number within bounds
    """
    if isinstance(percentage, bool):
        raise ValueError("Percentage must be a valid number")

    try:
        pct = float(percentage)
    except (ValueError, TypeError):
        raise ValueError("Percentage must be a valid number")

    if not math.isfinite(pct):
        raise ValueError("Percentage must be a finite number")

    if pct < min_val:
        raise ValueError(f"Percentage must be at least {min_val}")

    if max_val is not None and pct > max_val:
        raise ValueError(f"Percentage must be between {min_val} and {max_val}")

    return pct


def as_number(value: Any) -> float:
    """Coerce a display value to float, treating anything malformed as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (ValueError, TypeError):
        return 0.0
    return number if math.isfinite(number) else 0.0


# ============================================================================
# CLIENT ID VALIDATION
# ============================================================================

def validate_client_id(client_id: str) -> str:
    """
    Validate an opaque client-generated identifier

    Raises:
        InvalidParameterError: If the identifier is empty or contains
            characters outside [A-Za-z0-9_-.:]
    """
    if not isinstance(client_id, str) or not CLIENT_ID_PATTERN.match(client_id.strip()):
        raise InvalidParameterError(
            parameter="client_id",
            value=client_id,
            reason="must be 1-100 characters of letters, digits, '_', '-', '.' or ':'"
        )
    return client_id.strip()


# ============================================================================
# PORTFOLIO VALIDATION
# ============================================================================

def validate_portfolio(portfolio: Any, allow_empty: bool = False) -> List[Any]:
    """
    Validate that a portfolio is a list of allocations

    Args:
        portfolio: Submitted portfolio
        allow_empty: Whether an empty list is acceptable

    Returns:
        The portfolio, unchanged

    Raises:
        InvalidPortfolioError: If the portfolio is missing, not a list,
            or empty when ``allow_empty`` is False
    """
    if portfolio is None:
        raise InvalidPortfolioError("portfolio array is required")

    if not isinstance(portfolio, (list, tuple)):
        raise InvalidPortfolioError(
            "portfolio must be an array",
            details={"type": type(portfolio).__name__}
        )

    if not portfolio and not allow_empty:
        raise InvalidPortfolioError(
            "portfolio must contain at least one holding",
            details={"holding_count": 0}
        )

    return list(portfolio)

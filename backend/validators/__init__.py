"""
Input Validators for Portfolio Mirror

Validation and normalization helpers for request data.
"""

from .validators import (
    validate_ticker,
    validate_percentage,
    validate_client_id,
    validate_portfolio,
    as_number,
)

__all__ = [
    'validate_ticker',
    'validate_percentage',
    'validate_client_id',
    'validate_portfolio',
    'as_number',
]

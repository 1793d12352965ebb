"""Tests for input validators and the request models that use them."""

import math

import pytest
from pydantic import ValidationError as PydanticValidationError

from backend.exceptions import InvalidParameterError, InvalidPortfolioError, InvalidTickerError
from backend.models.portfolio import Allocation, PortfolioRequest
from backend.validators import (
    as_number,
    validate_client_id,
    validate_percentage,
    validate_portfolio,
    validate_ticker,
)


class TestValidateTicker:
    """Tests for validate_ticker()."""

    @pytest.mark.parametrize("ticker,expected", [
        ('TCS', 'TCS'),
        ('  infy ', 'INFY'),
        ('RELIANCE.NS', 'RELIANCE.NS'),
        ('BRK-B', 'BRK-B'),
        ('M&M', 'M&M'),
        ('^NSEI', '^NSEI'),
    ])
    def test_valid(self, ticker, expected):
        assert validate_ticker(ticker) == expected

    @pytest.mark.parametrize("ticker", [
        '',
        '   ',
        None,
        123,
        'A' * 16,
        'ABC;DROP',
        'ABC DEF',
        'ABC@DEF',
        'A..B',
    ])
    def test_invalid(self, ticker):
        with pytest.raises(InvalidTickerError):
            validate_ticker(ticker)


class TestValidatePercentage:
    """Tests for validate_percentage()."""

    def test_valid(self):
        assert validate_percentage(45) == 45.0
        assert validate_percentage('12.5') == 12.5
        assert validate_percentage(0) == 0.0

    @pytest.mark.parametrize("value", [-1, 'abc', None, True, math.inf, math.nan])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_percentage(value)

    def test_upper_bound(self):
        with pytest.raises(ValueError):
            validate_percentage(101, max_val=100)


class TestAsNumber:
    """Tests for as_number()."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5.0),
        ('7.5', 7.5),
        ('abc', 0.0),
        (None, 0.0),
        (False, 0.0),
        (math.inf, 0.0),
        ([], 0.0),
    ])
    def test_coercion(self, value, expected):
        assert as_number(value) == expected


class TestValidateClientId:
    """Tests for validate_client_id()."""

    def test_valid(self):
        assert validate_client_id(' user_123-abc:1 ') == 'user_123-abc:1'

    @pytest.mark.parametrize("client_id", ['', 'has space', 'x' * 101, None, 'semi;colon'])
    def test_invalid(self, client_id):
        with pytest.raises(InvalidParameterError):
            validate_client_id(client_id)


class TestValidatePortfolio:
    """Tests for validate_portfolio()."""

    def test_missing(self):
        with pytest.raises(InvalidPortfolioError) as exc_info:
            validate_portfolio(None)
        assert exc_info.value.error_code == 'INVALID_PORTFOLIO'
        assert exc_info.value.status_code == 400

    def test_not_a_list(self):
        with pytest.raises(InvalidPortfolioError) as exc_info:
            validate_portfolio({'ticker': 'TCS'})
        assert exc_info.value.details['type'] == 'dict'

    def test_empty_rejected_by_default(self):
        with pytest.raises(InvalidPortfolioError):
            validate_portfolio([])

    def test_empty_allowed(self):
        assert validate_portfolio([], allow_empty=True) == []

    def test_returns_list(self):
        assert validate_portfolio(({'ticker': 'TCS', 'percentage': 1},)) == [{'ticker': 'TCS', 'percentage': 1}]


class TestAllocationModel:
    """Tests for the Allocation request model."""

    def test_normalizes_ticker(self):
        assert Allocation(ticker=' tcs ', percentage=10).ticker == 'TCS'

    def test_rejects_bad_ticker(self):
        with pytest.raises(PydanticValidationError):
            Allocation(ticker='!!', percentage=10)

    @pytest.mark.parametrize("percentage", [-0.1, float('inf'), float('nan')])
    def test_rejects_bad_percentage(self, percentage):
        with pytest.raises(PydanticValidationError):
            Allocation(ticker='TCS', percentage=percentage)

    def test_percentage_above_100_allowed(self):
        assert Allocation(ticker='TCS', percentage=150).percentage == 150

    def test_portfolio_request_requires_list(self):
        with pytest.raises(PydanticValidationError):
            PortfolioRequest(portfolio='TCS')

    def test_portfolio_request_allows_empty(self):
        assert PortfolioRequest(portfolio=[]).portfolio == []

    def test_portfolio_request_strips_client_id(self):
        assert PortfolioRequest(portfolio=[], client_id=' browser-1 ').client_id == 'browser-1'

    @pytest.mark.parametrize("client_id", ['bad id!', '', '   '])
    def test_portfolio_request_rejects_bad_client_id(self, client_id):
        with pytest.raises(PydanticValidationError):
            PortfolioRequest(portfolio=[], client_id=client_id)

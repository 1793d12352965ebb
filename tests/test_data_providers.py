"""Tests for live quote providers."""

import pandas as pd
import pytest
import requests
from unittest.mock import MagicMock, patch

from backend.exceptions import MarketDataError
from backend.models.portfolio import QuoteSource
from backend.utils.data_providers import (
    AlphaVantageProvider,
    DataProvider,
    YahooFinanceProvider,
    quote_from_closes,
)


def alpha_vantage_payload(closes):
    """Build a TIME_SERIES_DAILY payload from oldest-to-newest closes"""
    dates = pd.date_range(end='2026-06-30', periods=len(closes), freq='D')
    # Alpha Vantage lists newest first
    series = {
        date.strftime('%Y-%m-%d'): {'1. open': str(close), '4. close': str(close)}
        for date, close in reversed(list(zip(dates, closes)))
    }
    return {'Meta Data': {}, 'Time Series (Daily)': series}


def mock_session(payload=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        session.get.return_value = response
    return session


class TestQuoteFromCloses:
    """Tests for quote_from_closes()."""

    def test_return_and_price(self):
        quote = quote_from_closes('TCS', [100.0, 105.0, 112.0], 'test')
        assert quote.price == 112.0
        assert quote.percent_return == 12.0
        assert quote.source == QuoteSource.LIVE
        assert quote.provider == 'test'

    def test_return_rounded_to_one_decimal(self):
        quote = quote_from_closes('TCS', [300.0, 301.0], 'test')
        assert quote.percent_return == 0.3

    @pytest.mark.parametrize("closes,expected", [
        ([100.0, 100.25], 0.3),
        ([100.0, 99.75], -0.3),
        ([200.0, 200.9], 0.5),
    ])
    def test_return_ties_round_away_from_zero(self, closes, expected):
        assert quote_from_closes('TCS', closes, 'test').percent_return == expected

    def test_price_ties_round_away_from_zero(self):
        assert quote_from_closes('TCS', [100.0, 101.125], 'test').price == 101.13

    def test_negative_return(self):
        assert quote_from_closes('INFY', [200.0, 190.0], 'test').percent_return == -5.0

    def test_needs_two_closes(self):
        with pytest.raises(MarketDataError):
            quote_from_closes('TCS', [100.0], 'test')

    def test_rejects_zero_start(self):
        with pytest.raises(MarketDataError):
            quote_from_closes('TCS', [0.0, 10.0], 'test')


class TestYahooFinanceProvider:
    """Tests for YahooFinanceProvider."""

    @patch('backend.utils.data_providers.yf.Ticker')
    def test_fetch_quote(self, mock_ticker, sample_stock_data):
        mock_ticker.return_value.history.return_value = sample_stock_data
        quote = YahooFinanceProvider().fetch_quote('TCS')

        mock_ticker.assert_called_once_with('TCS')
        mock_ticker.return_value.history.assert_called_once_with(period='1y')
        # Closes run 100..199
        assert quote.price == 199.0
        assert quote.percent_return == 99.0
        assert quote.provider == 'yfinance'

    @patch('backend.utils.data_providers.yf.Ticker')
    def test_empty_history_raises(self, mock_ticker):
        mock_ticker.return_value.history.return_value = pd.DataFrame()
        with pytest.raises(MarketDataError) as exc_info:
            YahooFinanceProvider().fetch_quote('NOPE')
        assert exc_info.value.details['ticker'] == 'NOPE'

    @patch('backend.utils.data_providers.yf.Ticker')
    def test_network_error_raises_market_data_error(self, mock_ticker):
        mock_ticker.return_value.history.side_effect = Exception("Network error")
        with pytest.raises(MarketDataError) as exc_info:
            YahooFinanceProvider().fetch_quote('TCS')
        assert exc_info.value.status_code == 502
        assert 'Network error' in exc_info.value.details['original_error']


class TestAlphaVantageProvider:
    """Tests for AlphaVantageProvider."""

    def test_fetch_quote_sorts_by_date(self):
        session = mock_session(alpha_vantage_payload([100.0, 105.0, 110.0]))
        quote = AlphaVantageProvider('key', session=session).fetch_quote('TCS')

        assert quote.price == 110.0
        assert quote.percent_return == 10.0
        assert quote.provider == 'alphavantage'

        params = session.get.call_args.kwargs['params']
        assert params['function'] == 'TIME_SERIES_DAILY'
        assert params['symbol'] == 'TCS'
        assert params['apikey'] == 'key'

    def test_compares_against_one_year_back(self):
        closes = [float(i) for i in range(1, 301)]
        session = mock_session(alpha_vantage_payload(closes))
        quote = AlphaVantageProvider('key', session=session).fetch_quote('TCS')

        # 300 closes: the window starts 252 from the end, at close 49
        assert quote.price == 300.0
        assert quote.percent_return == 512.2

    def test_rate_limit_note_raises(self):
        session = mock_session({'Note': 'Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute.'})
        with pytest.raises(MarketDataError) as exc_info:
            AlphaVantageProvider('key', session=session).fetch_quote('TCS')
        assert 'call frequency' in exc_info.value.message

    def test_error_message_raises(self):
        session = mock_session({'Error Message': 'Invalid API call.'})
        with pytest.raises(MarketDataError):
            AlphaVantageProvider('key', session=session).fetch_quote('ZZZZ')

    def test_http_error_raises(self):
        session = mock_session(error=requests.ConnectionError("down"))
        with pytest.raises(MarketDataError) as exc_info:
            AlphaVantageProvider('key', session=session).fetch_quote('TCS')
        assert exc_info.value.details['service'] == 'alphavantage'

    def test_malformed_series_raises(self):
        payload = {'Time Series (Daily)': {'2026-06-30': {'1. open': '1.0'}, '2026-06-29': {'1. open': '1.0'}}}
        with pytest.raises(MarketDataError):
            AlphaVantageProvider('key', session=mock_session(payload)).fetch_quote('TCS')


class TestDataProvider:
    """Tests for the DataProvider factory."""

    def test_yahoo(self):
        provider = DataProvider('yahoo')
        assert isinstance(provider.provider, YahooFinanceProvider)
        assert provider.name == 'yfinance'

    def test_alphavantage(self):
        provider = DataProvider('alphavantage', api_key='abc')
        assert isinstance(provider.provider, AlphaVantageProvider)
        assert provider.provider.api_key == 'abc'

    def test_unsupported(self):
        with pytest.raises(ValueError):
            DataProvider('bloomberg')

    def test_delegates_fetch(self, make_quote):
        provider = DataProvider('yahoo')
        with patch.object(provider.provider, 'fetch_quote', return_value=make_quote('TCS')) as fetch:
            assert provider.fetch_quote('TCS').ticker == 'TCS'
            fetch.assert_called_once_with('TCS')

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

import pandas as pd
import requests
import yfinance as yf

from ..config.market_data_config import (
    ALPHA_VANTAGE_API_KEY,
    ALPHA_VANTAGE_BASE_URL,
    QUOTE_REQUEST_TIMEOUT,
    TRADING_DAYS_PER_YEAR,
)
from ..exceptions import MarketDataError
from ..models.portfolio import Quote, QuoteSource
from ..services.metrics_engine import round_half_away_from_zero

logger = logging.getLogger(__name__)


def quote_from_closes(ticker: str, closes: List[float], provider: str) -> Quote:
    """
    Build a quote from a chronological series of closing prices.

    Price is the last close; return is the percent change from the first
    close of the series, rounded half away from zero to one decimal.
    """
    if len(closes) < 2:
        raise MarketDataError(ticker, provider=provider,
                              message=f"Not enough price history for {ticker}")

    first, last = float(closes[0]), float(closes[-1])
    if first <= 0:
        raise MarketDataError(ticker, provider=provider,
                              message=f"Invalid starting price for {ticker}")

    change = (Decimal(repr(last)) - Decimal(repr(first))) / Decimal(repr(first)) * 100
    return Quote(
        ticker=ticker,
        price=round_half_away_from_zero(last, places=2),
        percent_return=round_half_away_from_zero(float(change)),
        source=QuoteSource.LIVE,
        provider=provider,
    )


class BaseDataProvider(ABC):
    """Abstract base class for data providers"""

    name = "base"

    @abstractmethod
    def fetch_quote(self, ticker: str) -> Quote:
        """Fetch the current price and one-year return. Raises MarketDataError."""
        pass


class YahooFinanceProvider(BaseDataProvider):
    """Yahoo Finance data provider"""

    name = "yfinance"

    def __init__(self, period: str = '1y'):
        self.period = period

    def fetch_quote(self, ticker: str) -> Quote:
        """Fetch one year of daily history from Yahoo Finance"""
        try:
            hist = yf.Ticker(ticker).history(period=self.period)
        except Exception as e:
            logger.error("Error fetching data for %s: %s", ticker, e)
            raise MarketDataError(ticker, provider=self.name, original_error=e)

        if hist is None or hist.empty or 'Close' not in hist:
            raise MarketDataError(ticker, provider=self.name,
                                  message=f"No price history returned for {ticker}")

        closes = hist['Close'].dropna().tolist()
        return quote_from_closes(ticker, closes, self.name)


class AlphaVantageProvider(BaseDataProvider):
    """Alpha Vantage TIME_SERIES_DAILY data provider"""

    name = "alphavantage"

    def __init__(
        self,
        api_key: str,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        timeout: float = QUOTE_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_quote(self, ticker: str) -> Quote:
        params = {
            'function': 'TIME_SERIES_DAILY',
            'symbol': ticker,
            'apikey': self.api_key,
            'outputsize': 'compact',
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching data for %s: %s", ticker, e)
            raise MarketDataError(ticker, provider=self.name, original_error=e)

        series = payload.get('Time Series (Daily)')
        if not series:
            # Invalid symbol, rate-limit note or error message
            reason = payload.get('Error Message') or payload.get('Note') or payload.get('Information')
            raise MarketDataError(ticker, provider=self.name,
                                  message=reason or f"No price history returned for {ticker}")

        try:
            frame = pd.DataFrame.from_dict(series, orient='index')
            frame.index = pd.to_datetime(frame.index)
            closes = frame.sort_index()['4. close'].astype(float).tolist()
        except (KeyError, ValueError, TypeError) as e:
            raise MarketDataError(ticker, provider=self.name, original_error=e,
                                  message=f"Malformed price history for {ticker}")

        # Compare against the close roughly one year back, or the oldest available
        start = max(0, len(closes) - TRADING_DAYS_PER_YEAR)
        return quote_from_closes(ticker, closes[start:], self.name)


# Default data provider factory
class DataProvider:
    """Data provider factory and wrapper"""

    def __init__(self, provider_type: str = 'yahoo', api_key: str = None):
        if provider_type == 'yahoo':
            self.provider = YahooFinanceProvider()
        elif provider_type == 'alphavantage':
            api_key = api_key or ALPHA_VANTAGE_API_KEY
            if not api_key:
                raise ValueError("Alpha Vantage requires an API key")
            self.provider = AlphaVantageProvider(api_key)
        else:
            raise ValueError(f"Unsupported provider type: {provider_type}")

    @property
    def name(self) -> str:
        return self.provider.name

    def fetch_quote(self, ticker: str) -> Quote:
        """Fetch a quote via the configured provider"""
        return self.provider.fetch_quote(ticker)

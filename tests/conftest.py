"""
Pytest Configuration and Fixtures

Provides shared fixtures for testing Portfolio Mirror components.
"""

import os
import sys
import tempfile
from typing import Any, Dict, List
from unittest.mock import MagicMock, Mock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Set test environment before any backend module reads it
os.environ['ENVIRONMENT'] = 'test'
os.environ['LOG_LEVEL'] = 'ERROR'  # Reduce log noise in tests
os.environ['LOG_FILE_OUTPUT'] = 'false'
os.environ['RATE_LIMIT_ENABLED'] = 'false'  # Disable rate limiting for tests
os.environ['QUOTE_PROVIDER'] = 'yahoo'
os.environ['FALLBACK_JITTER'] = '0'
os.environ['GEMINI_API_KEY'] = ''
os.environ['DATABASE_URL'] = 'sqlite:///' + os.path.join(tempfile.mkdtemp(), 'test_portfolio_mirror.db')


# ============================================================================
# Mock Data Fixtures
# ============================================================================

@pytest.fixture
def sample_portfolio() -> List[Dict[str, Any]]:
    """Five-holding portfolio of tickers in the fallback table"""
    return [
        {'ticker': 'TCS', 'percentage': 30},
        {'ticker': 'RELIANCE', 'percentage': 25},
        {'ticker': 'HDFC', 'percentage': 20},
        {'ticker': 'BAJFINANCE', 'percentage': 15},
        {'ticker': 'ITC', 'percentage': 10},
    ]


@pytest.fixture
def make_holding():
    """Factory for EnrichedHolding instances"""
    from backend.models.portfolio import EnrichedHolding, QuoteSource

    def _make_holding(ticker, percentage, percent_return, price=100.0, source=QuoteSource.LIVE):
        return EnrichedHolding(
            ticker=ticker,
            percentage=percentage,
            price=price,
            percent_return=percent_return,
            source=source,
        )

    return _make_holding


@pytest.fixture
def make_quote():
    """Factory for live Quote instances"""
    from backend.models.portfolio import Quote, QuoteSource

    def _make_quote(ticker, price=100.0, percent_return=10.0, source=QuoteSource.LIVE):
        return Quote(ticker=ticker, price=price, percent_return=percent_return,
                     source=source, provider='test')

    return _make_quote


@pytest.fixture
def sample_stock_data():
    """One year of rising closes (yfinance format)"""
    import pandas as pd

    dates = pd.date_range(end='2026-06-30', periods=100, freq='D')
    data = {
        'Open': [100 + i for i in range(100)],
        'High': [102 + i for i in range(100)],
        'Low': [98 + i for i in range(100)],
        'Close': [100 + i for i in range(100)],
        'Volume': [1000000 + i * 10000 for i in range(100)],
    }
    return pd.DataFrame(data, index=dates)


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def failing_provider():
    """Data provider whose every fetch fails"""
    from backend.exceptions import MarketDataError

    provider = Mock()
    provider.name = 'test'
    provider.fetch_quote.side_effect = MarketDataError('ANY', provider='test')
    return provider


@pytest.fixture
def quote_service(failing_provider):
    """QuoteService that always answers from the fallback table"""
    from backend.cache import QuoteCache
    from backend.services.quote_service import QuoteService

    return QuoteService(data_provider=failing_provider, cache=QuoteCache(ttl_seconds=300),
                        fallback_jitter=0)


@pytest.fixture
def db_config():
    """Isolated in-memory database"""
    from backend.database.config import DatabaseConfig

    config = DatabaseConfig('sqlite://')
    config.create_all_tables()
    yield config
    config.engine.dispose()


@pytest.fixture
def usage_service(db_config):
    from backend.services.usage_service import UsageService

    return UsageService(db_config)


@pytest.fixture
def mock_generator():
    """Text generator returning a canned reply"""
    from backend.services.chat_service import TextGenerator

    generator = MagicMock(spec=TextGenerator)
    generator.generate_text.return_value = "You might be right, here's a safer approach."
    return generator


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def test_client(quote_service, usage_service, mock_generator):
    """FastAPI test client with fallback-only quotes, in-memory usage store and a mock chat"""
    from fastapi.testclient import TestClient

    from backend.main import app
    from backend.services.chat_service import ChatService, set_chat_service
    from backend.services.quote_service import set_quote_service
    from backend.services.usage_service import set_usage_service

    set_quote_service(quote_service)
    set_usage_service(usage_service)
    set_chat_service(ChatService(generator=mock_generator))

    yield TestClient(app)

    set_quote_service(None)
    set_usage_service(None)
    set_chat_service(None)

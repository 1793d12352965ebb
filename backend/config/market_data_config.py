"""
Market Data Configuration

Quote provider selection, quote cache bounds and the fallback quote table
used when a live quote cannot be obtained.
"""

import os

from dotenv import load_dotenv

load_dotenv()

QUOTE_PROVIDER = os.getenv('QUOTE_PROVIDER', 'yahoo').lower()
ALPHA_VANTAGE_API_KEY = os.getenv('ALPHA_VANTAGE_API_KEY', 'demo')
ALPHA_VANTAGE_BASE_URL = os.getenv('ALPHA_VANTAGE_BASE_URL', 'https://www.alphavantage.co/query')
QUOTE_REQUEST_TIMEOUT = float(os.getenv('QUOTE_REQUEST_TIMEOUT', '10'))

QUOTE_CACHE_TTL = int(os.getenv('QUOTE_CACHE_TTL', '300'))  # 5 minutes
QUOTE_MAX_CONCURRENCY = int(os.getenv('QUOTE_MAX_CONCURRENCY', '10'))

# Width of the uniform jitter applied to fallback returns; 0 disables it
FALLBACK_JITTER = float(os.getenv('FALLBACK_JITTER', '0'))
FALLBACK_SEED = os.getenv('FALLBACK_SEED')

# Approx. trading days in one year
TRADING_DAYS_PER_YEAR = 252

# ticker -> (price, one-year percent return)
FALLBACK_QUOTES = {
    'TCS': (3500, 12),
    'INFY': (1500, -5),
    'RELIANCE': (2500, 8),
    'HDFC': (2800, 15),
    'ICICIBANK': (900, 6),
    'SBIN': (550, -2),
    'WIPRO': (450, 3),
    'BHARTIARTL': (1200, 18),
    'ITC': (400, 4),
    'LT': (3200, 9),
    'ASIANPAINT': (3200, 7),
    'MARUTI': (9500, -1),
    'NESTLEIND': (18000, 5),
    'BAJFINANCE': (6500, 22),
    'HINDUNILVR': (2500, 2),
    'KOTAKBANK': (1800, 11),
    'AXISBANK': (1100, 13),
    'TITAN': (3200, 16),
    'ULTRACEMCO': (7500, -3),
    'POWERGRID': (250, 1),
    'TESLA': (250, 15),
    'TSLA': (250, 15),
    'AAPL': (180, 8),
    'GOOGL': (140, 12),
    'MSFT': (350, 10),
    'AMZN': (150, 6),
    'META': (300, 20),
}

# Unknown tickers borrow this entry
REFERENCE_TICKER = 'TCS'

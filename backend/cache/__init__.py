"""
Cache Package

Provides the in-process quote cache.

Usage:
    from backend.cache import QuoteCache

    cache = QuoteCache(ttl_seconds=300)
    cache.set("TCS", quote)
    quote = cache.get("TCS")
"""

from .quote_cache import QuoteCache

__all__ = [
    'QuoteCache',
]

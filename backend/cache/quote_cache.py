"""
Quote Cache

Short-lived in-process cache for live quotes. Entries older than the TTL
are treated as absent and evicted when read.

Only live quotes are cached; fallback quotes are always recomputed so a
recovering provider is picked up on the next request.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from ..config.market_data_config import QUOTE_CACHE_TTL
from ..models.portfolio import Quote

logger = logging.getLogger(__name__)


class QuoteCache:
    """
    Dict-based ticker -> quote cache with per-entry TTL.

    The clock is injectable so tests can move time forward without sleeping.
    Not shared across worker processes.
    """

    def __init__(
        self,
        ttl_seconds: float = QUOTE_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Quote, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, ticker: str) -> Optional[Quote]:
        """Return the cached quote for ticker, or None if absent or expired"""
        with self._lock:
            entry = self._entries.get(ticker)
            if entry is None:
                self._misses += 1
                return None

            quote, stored_at = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                # Expired
                del self._entries[ticker]
                self._misses += 1
                return None

            self._hits += 1
            return quote

    def set(self, ticker: str, quote: Quote) -> None:
        with self._lock:
            self._entries[ticker] = (quote, self._clock())

    def delete(self, ticker: str) -> bool:
        with self._lock:
            return self._entries.pop(ticker, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Quote cache cleared")

    def info(self) -> dict:
        """Get cache statistics"""
        with self._lock:
            total = self._hits + self._misses
            return {
                'cache_type': 'in-memory',
                'total_keys': len(self._entries),
                'ttl_seconds': self.ttl_seconds,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': round(self._hits / total, 3) if total else 0.0,
            }

    def __len__(self) -> int:
        return len(self._entries)

"""
Quote Service for Portfolio Mirror
Centralizes quote lookup: cache first, then the live provider, then the
fallback table. A lookup never fails.
"""

import logging
import random
from typing import List, Optional, Sequence, Tuple

from ..cache import QuoteCache
from ..config.market_data_config import (
    FALLBACK_JITTER,
    FALLBACK_QUOTES,
    FALLBACK_SEED,
    QUOTE_MAX_CONCURRENCY,
    QUOTE_PROVIDER,
    REFERENCE_TICKER,
)
from ..models.portfolio import (
    Allocation,
    DataSource,
    EnrichedHolding,
    Quote,
    QuoteSource,
)
from ..utils.concurrent import map_in_threads
from ..validators import validate_ticker

logger = logging.getLogger(__name__)


def resolve_data_source(holdings: Sequence[EnrichedHolding]) -> DataSource:
    """Label a batch live, fallback or mixed by the sources of its quotes."""
    sources = {holding.source for holding in holdings}
    if sources == {QuoteSource.LIVE}:
        return DataSource.LIVE
    if sources == {QuoteSource.FALLBACK}:
        return DataSource.FALLBACK
    if not sources:
        # Nothing was fetched; nothing live to claim
        return DataSource.FALLBACK
    return DataSource.MIXED


class QuoteService:
    """Quote lookup with caching and per-ticker fallback.

    Only live quotes are cached. When fallback jitter is enabled the random
    source is injectable so results can be made reproducible.
    """

    def __init__(self, data_provider=None, cache: Optional[QuoteCache] = None,
                 fallback_jitter: float = FALLBACK_JITTER,
                 rng: Optional[random.Random] = None,
                 max_concurrent: int = QUOTE_MAX_CONCURRENCY) -> None:
        if data_provider is None:
            from ..utils.data_providers import DataProvider
            data_provider = DataProvider(QUOTE_PROVIDER)
        self.data_provider = data_provider
        self.cache: QuoteCache = cache if cache is not None else QuoteCache()
        self.fallback_jitter = max(0.0, fallback_jitter)
        self.rng = rng or random.Random(FALLBACK_SEED)
        self.max_concurrent = max_concurrent

    @property
    def provider_name(self) -> str:
        return getattr(self.data_provider, 'name', type(self.data_provider).__name__)

    def get_quote(self, ticker: str) -> Quote:
        """Get a quote for one ticker.

        Checks the cache, then the live provider. Any provider failure is
        logged and answered from the fallback table.
        """
        ticker = validate_ticker(ticker)

        cached = self.cache.get(ticker)
        if cached is not None:
            return cached

        try:
            quote = self.data_provider.fetch_quote(ticker)
        except Exception as e:
            logger.warning(
                "Live quote failed for %s, using fallback data: %s", ticker, e,
                extra={'ticker': ticker, 'data_source': QuoteSource.FALLBACK.value}
            )
            return self.fallback_quote(ticker)

        self.cache.set(ticker, quote)
        return quote

    def fallback_quote(self, ticker: str) -> Quote:
        """Build a quote from the fallback table.

        Unknown tickers borrow the reference ticker's entry.
        """
        price, percent_return = FALLBACK_QUOTES.get(ticker, FALLBACK_QUOTES[REFERENCE_TICKER])
        price, percent_return = float(price), float(percent_return)

        if self.fallback_jitter > 0:
            half = self.fallback_jitter / 2
            percent_return = round(percent_return + self.rng.uniform(-half, half), 1)
            # Price moves by up to five units per point of jitter
            price = max(0.0, price + round(self.rng.uniform(-half, half) * 10))

        return Quote(
            ticker=ticker,
            price=price,
            percent_return=percent_return,
            source=QuoteSource.FALLBACK,
            provider='fallback',
        )

    async def get_enriched_holdings(
        self, allocations: Sequence[Allocation]
    ) -> Tuple[List[EnrichedHolding], DataSource]:
        """Fetch quotes for every allocation concurrently and join them.

        Order is preserved and no holding is dropped.
        """
        quotes = await map_in_threads(
            self.get_quote,
            [allocation.ticker for allocation in allocations],
            max_concurrent=self.max_concurrent
        )
        holdings = [
            EnrichedHolding.from_quote(allocation, quote)
            for allocation, quote in zip(allocations, quotes)
        ]
        data_source = resolve_data_source(holdings)
        logger.info(
            "Fetched %d quotes", len(holdings),
            extra={'data_source': data_source.value}
        )
        return holdings, data_source


# Module-level singleton
_quote_service: Optional[QuoteService] = None


def get_quote_service() -> QuoteService:
    """Get the global QuoteService singleton (creates one if not set)."""
    global _quote_service
    if _quote_service is None:
        _quote_service = QuoteService()
    return _quote_service


def set_quote_service(instance: Optional[QuoteService]) -> None:
    """Set the global QuoteService singleton (called at startup and in tests)."""
    global _quote_service
    _quote_service = instance

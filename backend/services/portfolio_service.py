"""
Portfolio Service
Orchestrates quotes, metrics and advice for the portfolio endpoints.
"""

import logging
from typing import Optional, Sequence

from ..config.logging_config import PerformanceLogger
from ..models.portfolio import (
    Allocation,
    AnalysisResponse,
    MirrorResponse,
    WarningsResponse,
)
from ..validators import validate_portfolio
from .advice_generator import (
    build_summary,
    classify_portfolio,
    generate_reflections,
    generate_warnings,
)
from .metrics_engine import compute_metrics
from .quote_service import QuoteService, get_quote_service
from .usage_service import UsageService, get_usage_service

logger = logging.getLogger(__name__)


class PortfolioService:
    """Service for the mirror, warnings and analysis operations"""

    def __init__(self, quote_service: Optional[QuoteService] = None,
                 usage_service: Optional[UsageService] = None) -> None:
        self._quote_service = quote_service
        self._usage_service = usage_service

    @property
    def quote_service(self) -> QuoteService:
        return self._quote_service or get_quote_service()

    @property
    def usage_service(self) -> UsageService:
        return self._usage_service or get_usage_service()

    async def mirror(self, portfolio: Sequence[Allocation],
                     client_id: Optional[str] = None) -> MirrorResponse:
        """
        Past-self reflections, summary and metrics for a portfolio.

        When client_id is given the submission is counted and logged;
        storage failures are logged and ignored.

        Raises:
            InvalidPortfolioError: If the portfolio is empty
        """
        portfolio = validate_portfolio(portfolio)

        with PerformanceLogger(logger, "portfolio mirror"):
            holdings, data_source = await self.quote_service.get_enriched_holdings(portfolio)
            metrics = compute_metrics(holdings)
            response = MirrorResponse(
                reflections=generate_reflections(holdings),
                summary=build_summary(metrics),
                metrics=metrics,
                data_source=data_source,
            )

        if client_id:
            self.usage_service.track_submission(client_id, portfolio, action='mirror')

        return response

    def warnings(self, portfolio: Sequence[Allocation]) -> WarningsResponse:
        """Rule-based warnings. An empty portfolio still gets the general warnings."""
        portfolio = validate_portfolio(portfolio, allow_empty=True)
        return WarningsResponse(warnings=generate_warnings(portfolio))

    async def analyze(self, portfolio: Sequence[Allocation],
                      client_id: Optional[str] = None) -> AnalysisResponse:
        """Holdings, metrics and qualitative classification for a portfolio."""
        portfolio = validate_portfolio(portfolio)

        with PerformanceLogger(logger, "portfolio analysis"):
            holdings, data_source = await self.quote_service.get_enriched_holdings(portfolio)
            metrics = compute_metrics(holdings)
            response = AnalysisResponse(
                holdings=holdings,
                metrics=metrics,
                analysis=classify_portfolio(metrics),
                data_source=data_source,
            )

        if client_id:
            self.usage_service.track_submission(client_id, portfolio, action='analyze')

        return response


# Module-level singleton
_portfolio_service: Optional[PortfolioService] = None


def get_portfolio_service() -> PortfolioService:
    """Get the global PortfolioService singleton (creates one if not set)."""
    global _portfolio_service
    if _portfolio_service is None:
        _portfolio_service = PortfolioService()
    return _portfolio_service

"""
Portfolio API Endpoints (v1)

Past-self mirror, anti-advice warnings and portfolio analysis.
"""

from fastapi import APIRouter, Request, Response
import logging

from ...services.portfolio_service import get_portfolio_service
from ...models.portfolio import (
    AnalysisResponse,
    MirrorResponse,
    PortfolioRequest,
    WarningsResponse,
)
from ...config.rate_limit_config import limiter, RateLimits
from .error_responses import PORTFOLIO_ERRORS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/mirror", response_model=MirrorResponse, responses=PORTFOLIO_ERRORS)
@limiter.limit(RateLimits.EXPENSIVE)
async def mirror_portfolio(request: Request, response: Response, payload: PortfolioRequest):
    """
    Reflect a portfolio against each holding's past-year performance.

    **Returns:**
    - One reflection per holding
    - Portfolio summary line
    - Aggregate metrics (weighted return, best/worst performer, average return)
    - `data_source`: `live`, `fallback` or `mixed`

    When `client_id` is supplied the submission is counted and logged.

    **Rate Limit:** 20 requests/minute (fetches a quote per holding)

    **Example Request Body:**
    ```json
    {
      "portfolio": [
        {"ticker": "TCS", "percentage": 50},
        {"ticker": "INFY", "percentage": 50}
      ],
      "client_id": "browser-1234"
    }
    ```
    """
    logger.info(
        f"Mirroring portfolio with {len(payload.portfolio)} holdings",
        extra={'client_id': payload.client_id}
    )
    return await get_portfolio_service().mirror(payload.portfolio, payload.client_id)


@router.post("/warnings", response_model=WarningsResponse, responses=PORTFOLIO_ERRORS)
@limiter.limit(RateLimits.PUBLIC_API)
async def portfolio_warnings(request: Request, response: Response, payload: PortfolioRequest):
    """
    Rule-based anti-advice for a portfolio.

    Flags over-concentration, under-diversification, tech-heavy and
    too-conservative allocations, then always adds three general warnings.

    **Rate Limit:** 100 requests/minute
    """
    return get_portfolio_service().warnings(payload.portfolio)


@router.post("/analyze", response_model=AnalysisResponse, responses=PORTFOLIO_ERRORS)
@limiter.limit(RateLimits.EXPENSIVE)
async def analyze_portfolio(request: Request, response: Response, payload: PortfolioRequest):
    """
    Enriched holdings, metrics and qualitative labels for a portfolio.

    **Returns:**
    - Holdings joined with their quotes
    - Aggregate metrics
    - Risk level, diversification, performance and recommendation labels

    **Rate Limit:** 20 requests/minute (fetches a quote per holding)
    """
    logger.info(
        f"Analyzing portfolio with {len(payload.portfolio)} holdings",
        extra={'client_id': payload.client_id}
    )
    return await get_portfolio_service().analyze(payload.portfolio, payload.client_id)

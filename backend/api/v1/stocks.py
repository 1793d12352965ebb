"""
Stock Quote API Endpoints (v1)
"""

import asyncio
import logging

from fastapi import APIRouter, Path, Request, Response

from ...services.quote_service import get_quote_service
from ...models.portfolio import Quote
from ...config.rate_limit_config import limiter, RateLimits
from .error_responses import QUOTE_ERRORS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{symbol}", response_model=Quote, responses=QUOTE_ERRORS)
@limiter.limit(RateLimits.PUBLIC_API)
async def get_stock_quote(
    request: Request,
    response: Response,
    symbol: str = Path(..., description="Stock ticker symbol", examples=["TCS"])
):
    """
    Price and one-year return for a single ticker.

    Falls back to reference data when the live source is unavailable;
    check `source` to tell the two apart.

    **Rate Limit:** 100 requests/minute
    """
    return await asyncio.to_thread(get_quote_service().get_quote, symbol)

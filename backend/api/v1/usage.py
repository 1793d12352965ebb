"""
Usage API Endpoints (v1)

Per-client usage counter and portfolio history.
"""

from fastapi import APIRouter, Query, Request, Response
import logging

from ...services.usage_service import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    get_usage_service,
)
from ...models.api_responses import HistoryResponse, UsageRequest, UsageResponse
from ...config.rate_limit_config import limiter, RateLimits
from .error_responses import USAGE_ERRORS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UsageResponse, responses=USAGE_ERRORS)
@limiter.limit(RateLimits.WRITE)
def record_usage(request: Request, response: Response, payload: UsageRequest):
    """
    Count one action for a client.

    **Rate Limit:** 50 requests/minute
    """
    count = get_usage_service().increment_usage(payload.client_id, payload.action)
    return UsageResponse(client_id=payload.client_id, usage_count=count)


@router.get("/{client_id}", response_model=UsageResponse, responses=USAGE_ERRORS)
@limiter.limit(RateLimits.READ_ONLY)
def get_usage(request: Request, response: Response, client_id: str):
    """
    Current usage count for a client (0 if never seen).

    **Rate Limit:** 500 requests/minute
    """
    count = get_usage_service().get_usage_count(client_id)
    return UsageResponse(client_id=client_id, usage_count=count)


@router.get("/{client_id}/history", response_model=HistoryResponse, responses=USAGE_ERRORS)
@limiter.limit(RateLimits.READ_ONLY)
def get_history(
    request: Request,
    response: Response,
    client_id: str,
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT)
):
    """
    Most recent portfolio submissions for a client, newest first.

    **Rate Limit:** 500 requests/minute
    """
    entries = get_usage_service().get_history(client_id, limit=limit)
    return HistoryResponse(client_id=client_id, count=len(entries), entries=entries)

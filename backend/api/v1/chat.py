"""
Chat API Endpoints (v1)

"Debate your AI" coach.
"""

from fastapi import APIRouter, Request, Response
import logging

from ...services.chat_service import get_chat_service
from ...models.api_responses import ChatRequest, ChatResponse
from ...config.rate_limit_config import limiter, RateLimits
from .error_responses import CHAT_ERRORS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/debate", response_model=ChatResponse, responses=CHAT_ERRORS)
@limiter.limit(RateLimits.EXPENSIVE)
async def debate(request: Request, response: Response, payload: ChatRequest):
    """
    Argue with the AI coach about buying or selling a stock.

    Provider failures never surface as errors; the reply falls back to a
    fixed apology instead.

    **Rate Limit:** 20 requests/minute
    """
    reply = await get_chat_service().reply_async(payload.question)
    return ChatResponse(reply=reply)

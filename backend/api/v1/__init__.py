"""
API v1 Package

Version 1 of the Portfolio Mirror API.
"""

from fastapi import APIRouter

# Import all v1 routers
from .portfolio import router as portfolio_router
from .chat import router as chat_router
from .stocks import router as stocks_router
from .usage import router as usage_router

# Create v1 API router
api_router = APIRouter()

# Include all routers
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(chat_router, prefix="/chat", tags=["chat"])
api_router.include_router(stocks_router, prefix="/stocks", tags=["stocks"])
api_router.include_router(usage_router, prefix="/usage", tags=["usage"])

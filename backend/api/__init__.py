"""
HTTP routes for Portfolio Mirror, grouped by API version.

main.py mounts ``api_router`` under /api, giving /api/v1/...
"""

from fastapi import APIRouter

from .v1 import api_router as v1_router

api_router = APIRouter()
api_router.include_router(v1_router, prefix="/v1")

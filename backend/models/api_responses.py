"""
Pydantic request/response models for the chat, usage and health endpoints.

Provides typed bodies for OpenAPI documentation and response validation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..config.chat_config import MAX_QUESTION_LENGTH
from .portfolio import Allocation


# --- Chat ---

class ChatRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=MAX_QUESTION_LENGTH)


class ChatResponse(BaseModel):
    reply: str


# --- Usage ---

class UsageRequest(BaseModel):
    client_id: str = Field(..., min_length=1, max_length=100)
    action: str = Field("analyze", min_length=1, max_length=50)


class UsageResponse(BaseModel):
    client_id: str
    usage_count: int


class HistoryEntry(BaseModel):
    id: int
    action: str
    portfolio: List[Allocation]
    created_at: Optional[datetime] = None


class HistoryResponse(BaseModel):
    client_id: str
    count: int
    entries: List[HistoryEntry]


# --- Health ---

class HealthResponse(BaseModel):
    status: str
    message: str
    quote_provider: str
    chat_configured: bool

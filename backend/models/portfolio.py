from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import InvalidParameterError, InvalidTickerError
from ..validators import validate_client_id, validate_ticker


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuoteSource(str, Enum):
    """Where a single quote came from"""
    LIVE = "live"
    FALLBACK = "fallback"


class DataSource(str, Enum):
    """Aggregate origin of the quotes behind one response"""
    LIVE = "live"
    FALLBACK = "fallback"
    MIXED = "mixed"


class Allocation(BaseModel):
    """User-declared ticker and allocation percentage"""
    ticker: str = Field(..., description="Ticker symbol, normalized to uppercase")
    percentage: float = Field(..., ge=0, allow_inf_nan=False, description="Percent of portfolio")

    @field_validator('ticker', mode='before')
    @classmethod
    def normalize_ticker(cls, value):
        try:
            return validate_ticker(value)
        except InvalidTickerError as e:
            raise ValueError(e.message)


class PortfolioRequest(BaseModel):
    """Request body for the portfolio endpoints"""
    portfolio: List[Allocation]
    client_id: Optional[str] = Field(None, max_length=100, description="Opaque client identifier")

    @field_validator('client_id')
    @classmethod
    def check_client_id(cls, value):
        if value is None:
            return value
        try:
            return validate_client_id(value)
        except InvalidParameterError as e:
            raise ValueError(e.message)


class Quote(BaseModel):
    """Point-in-time price and one-year percent return for a ticker"""
    model_config = ConfigDict(frozen=True)

    ticker: str
    price: float = Field(..., ge=0)
    percent_return: float
    source: QuoteSource = QuoteSource.LIVE
    provider: str = "yfinance"
    fetched_at: datetime = Field(default_factory=utc_now)


class EnrichedHolding(BaseModel):
    """An allocation joined with its quote"""
    ticker: str
    percentage: float
    price: float
    percent_return: float
    source: QuoteSource = QuoteSource.LIVE

    @classmethod
    def from_quote(cls, allocation: Allocation, quote: Quote) -> "EnrichedHolding":
        return cls(
            ticker=allocation.ticker,
            percentage=allocation.percentage,
            price=quote.price,
            percent_return=quote.percent_return,
            source=quote.source,
        )


class PortfolioMetrics(BaseModel):
    """Aggregate statistics for one set of holdings"""
    total_allocation: float
    weighted_return: float
    best_performer: EnrichedHolding
    worst_performer: EnrichedHolding
    holding_count: int
    average_return: float


class PortfolioClassification(BaseModel):
    """Qualitative labels derived from portfolio metrics"""
    risk_level: str
    diversification: str
    performance: str
    recommendation: str


class MirrorResponse(BaseModel):
    """Past-self reflections for a submitted portfolio"""
    reflections: List[str]
    summary: str
    metrics: PortfolioMetrics
    data_source: DataSource
    last_updated: datetime = Field(default_factory=utc_now)


class WarningsResponse(BaseModel):
    """Rule-based anti-advice warnings"""
    warnings: List[str]


class AnalysisResponse(BaseModel):
    """Holdings, metrics and classification for a submitted portfolio"""
    holdings: List[EnrichedHolding]
    metrics: PortfolioMetrics
    analysis: PortfolioClassification
    data_source: DataSource
    timestamp: datetime = Field(default_factory=utc_now)

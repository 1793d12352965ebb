"""
Portfolio Mirror Database Models

SQLAlchemy ORM models for the per-client usage counter and the
portfolio submission history.
"""

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UsageCounter(Base):
    """How many times a client has requested advice"""
    __tablename__ = 'usage_counters'

    client_id = Column(String(100), primary_key=True)
    usage_count = Column(Integer, default=0, nullable=False)
    last_action = Column(String(50))
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UsageCounter(client_id='{self.client_id}', usage_count={self.usage_count})>"


class PortfolioRecord(Base):
    """One submitted portfolio, stored as JSON"""
    __tablename__ = 'portfolio_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(String(100), nullable=False)
    action = Column(String(50), nullable=False, default='mirror')
    portfolio_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_portfolio_history_client', 'client_id', 'created_at'),
    )

    def __repr__(self):
        return f"<PortfolioRecord(id={self.id}, client_id='{self.client_id}')>"

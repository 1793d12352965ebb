"""
Usage Service
Per-client usage counter and portfolio history log, keyed by an opaque
client-generated identifier.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..database.config import DatabaseConfig, db_config as default_db_config
from ..exceptions import DatabaseError
from ..models.api_responses import HistoryEntry
from ..models.database import PortfolioRecord, UsageCounter
from ..validators import validate_client_id

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100


def _serialize_portfolio(portfolio: Iterable[Any]) -> str:
    entries = []
    for allocation in portfolio:
        if hasattr(allocation, 'model_dump'):
            allocation = allocation.model_dump()
        entries.append({
            'ticker': allocation.get('ticker'),
            'percentage': allocation.get('percentage'),
        })
    return json.dumps(entries)


class UsageService:
    """Service for usage tracking and portfolio history"""

    def __init__(self, db: Optional[DatabaseConfig] = None):
        self.db = db or default_db_config
        self._tables_ready = False

    def _ensure_tables(self) -> None:
        if not self._tables_ready:
            self.db.create_all_tables()
            self._tables_ready = True

    def increment_usage(self, client_id: str, action: str = 'analyze') -> int:
        """
        Add one to the client's usage counter

        Returns:
            The new count

        Raises:
            InvalidParameterError: If client_id is malformed
            DatabaseError: If the store cannot be written
        """
        client_id = validate_client_id(client_id)
        try:
            self._ensure_tables()
            with self.db.get_session_context() as session:
                counter = session.get(UsageCounter, client_id)
                if counter is None:
                    counter = UsageCounter(client_id=client_id, usage_count=0)
                    session.add(counter)
                counter.usage_count = (counter.usage_count or 0) + 1
                counter.last_action = action
                count = counter.usage_count
        except SQLAlchemyError as e:
            raise DatabaseError("increment usage", original_error=e)

        logger.info("Usage recorded", extra={'client_id': client_id})
        return count

    def get_usage_count(self, client_id: str) -> int:
        """Current usage count; 0 for unknown clients"""
        client_id = validate_client_id(client_id)
        try:
            self._ensure_tables()
            with self.db.get_session_context() as session:
                counter = session.get(UsageCounter, client_id)
                return counter.usage_count if counter else 0
        except SQLAlchemyError as e:
            raise DatabaseError("read usage", original_error=e)

    def record_portfolio(self, client_id: str, portfolio: Iterable[Any], action: str = 'mirror') -> int:
        """Append a portfolio to the client's history log and return its id"""
        client_id = validate_client_id(client_id)
        try:
            self._ensure_tables()
            with self.db.get_session_context() as session:
                record = PortfolioRecord(
                    client_id=client_id,
                    action=action,
                    portfolio_json=_serialize_portfolio(portfolio),
                )
                session.add(record)
                session.flush()
                record_id = record.id
        except SQLAlchemyError as e:
            raise DatabaseError("record portfolio", original_error=e)

        return record_id

    def get_history(self, client_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
        """Most recent portfolio submissions first"""
        client_id = validate_client_id(client_id)
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
        try:
            self._ensure_tables()
            with self.db.get_session_context() as session:
                records = (
                    session.query(PortfolioRecord)
                    .filter(PortfolioRecord.client_id == client_id)
                    .order_by(PortfolioRecord.created_at.desc(), PortfolioRecord.id.desc())
                    .limit(limit)
                    .all()
                )
                return [
                    HistoryEntry(
                        id=record.id,
                        action=record.action,
                        portfolio=json.loads(record.portfolio_json),
                        created_at=record.created_at,
                    )
                    for record in records
                ]
        except SQLAlchemyError as e:
            raise DatabaseError("read history", original_error=e)

    def track_submission(self, client_id: str, portfolio: Iterable[Any], action: str) -> Dict[str, Any]:
        """
        Count a submission and log its portfolio without ever raising.

        Used by request handlers where storage problems must not fail
        the response.
        """
        try:
            count = self.increment_usage(client_id, action)
            self.record_portfolio(client_id, portfolio, action)
            return {'usage_count': count}
        except Exception as e:
            logger.warning("Failed to record usage: %s", e, extra={'client_id': client_id})
            return {}


# Module-level singleton
_usage_service: Optional[UsageService] = None


def get_usage_service() -> UsageService:
    """Get the global UsageService singleton (creates one if not set)."""
    global _usage_service
    if _usage_service is None:
        _usage_service = UsageService()
    return _usage_service


def set_usage_service(instance: Optional[UsageService]) -> None:
    """Set the global UsageService singleton (called in tests)."""
    global _usage_service
    _usage_service = instance

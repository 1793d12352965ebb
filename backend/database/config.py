"""
Database Configuration

Engine and session management for the usage store. Defaults to a local
SQLite file; set DATABASE_URL for any other SQLAlchemy-supported backend.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models.database import Base

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = 'sqlite:///./portfolio_mirror.db'


class DatabaseConfig:
    """Owns the SQLAlchemy engine and hands out scoped sessions"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL)
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def initialize_engine(self) -> Engine:
        """Create the engine on first use."""
        if self.engine is not None:
            return self.engine

        kwargs = {}
        if self.database_url.startswith('sqlite'):
            kwargs['connect_args'] = {'check_same_thread': False}
            if ':memory:' in self.database_url or self.database_url == 'sqlite://':
                # One shared connection so every session sees the same in-memory db
                kwargs['poolclass'] = StaticPool

        self.engine = create_engine(self.database_url, **kwargs)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info("Database engine initialized", extra={'path': self._redacted_url()})
        return self.engine

    def create_all_tables(self) -> None:
        self.initialize_engine()
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session_context(self) -> Iterator[Session]:
        """
        Yield a session that commits on success and rolls back on error.

        Example:
            with db_config.get_session_context() as session:
                session.add(record)
        """
        self.initialize_engine()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _redacted_url(self) -> str:
        if '@' in self.database_url:
            scheme, _, rest = self.database_url.partition('://')
            return f"{scheme}://***@{rest.split('@', 1)[1]}"
        return self.database_url


db_config = DatabaseConfig()

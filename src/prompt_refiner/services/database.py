"""
Database connection and session management for the prompt store.

One Database instance owns an engine and a scoped session factory; the
orchestrator receives the store built on it, so nothing here is a
process-wide singleton.
"""

from contextlib import contextmanager
from typing import Generator, Optional

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import settings

logger = structlog.get_logger(__name__)


def create_db_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    SQLite URLs get check_same_thread disabled (sessions run in worker
    threads); in-memory SQLite shares one connection via StaticPool.

    Examples:
        >>> engine = create_db_engine("sqlite://")
        >>> engine.url.get_backend_name()
        'sqlite'
    """
    url = url or settings.store_db_url
    echo = settings.store_db_echo_sql if echo is None else echo

    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True  # Verify connections before using

    engine = create_engine(url, echo=echo, **kwargs)
    logger.info("store_db_engine_created", backend=engine.url.get_backend_name(), database=engine.url.database)
    return engine


class Database:
    """Engine plus session factory."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.engine = create_db_engine(url, echo)
        self._session_factory = scoped_session(sessionmaker(bind=self.engine, expire_on_commit=False))

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with automatic commit/rollback.

        Usage:
            >>> with database.session() as session:
            ...     session.add(PromptRecord(...))
            ...     # Automatically commits on success, rolls back on exception

        Yields:
            SQLAlchemy Session instance

        Raises:
            Exception: Any database exception (after rollback)
        """
        session = self._session_factory()

        try:
            yield session
            session.commit()
            logger.debug("store_db_session_committed")
        except Exception as e:
            session.rollback()
            logger.error("store_db_session_rollback", error=str(e), error_type=type(e).__name__)
            raise
        finally:
            session.close()
            self._session_factory.remove()

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def create_all_tables(self) -> None:
        """Create all store tables (tests and first start; no migrations)."""
        from .orm import Base

        Base.metadata.create_all(self.engine)
        logger.info("store_db_tables_created")

    def drop_all_tables(self) -> None:
        """
        Drop all store tables.

        WARNING: Destructive operation. Only use for testing.
        """
        from .orm import Base

        Base.metadata.drop_all(self.engine)
        logger.warning("store_db_tables_dropped")

    def dispose(self) -> None:
        self._session_factory.remove()
        self.engine.dispose()

import contextlib
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from core.config_loader import DatabaseConfig
from database.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(config: DatabaseConfig) -> Engine:
    if config.url.startswith('sqlite'):
        # Single shared connection so in-memory databases survive across threads
        engine = create_engine(
            config.url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        config.url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=config.pool_size,
        max_overflow=config.max_overflow
    )


class DatabaseManager:
    """Owns the engine and session factory; passed explicitly instead of living at module level."""

    def __init__(self, config: DatabaseConfig):
        self.engine = build_engine(config)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ensured")

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    @contextlib.contextmanager
    def session_scope(self):
        """Provide a transactional scope around a series of operations."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()

"""Database connection and session management utilities."""

import os
from typing import Iterator, Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from .config import DatabaseConfig
from .constants import CONNECTION_POOL_DEFAULTS
from .validators import validate_database_compatibility_sync

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Manages database connections with connection pooling."""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """Initialize database manager.

        Args:
            config: Connection configuration. If not provided, it is read
                    from the environment (DATABASE_URL or DB_* variables).
        """
        self.config = config or DatabaseConfig.from_env()
        if self.config.driver == "postgresql+asyncpg":
            raise ValueError("DatabaseManager needs a synchronous driver, not asyncpg")

        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.initialize()
        return self._engine

    def _engine_config(self) -> dict:
        if self.config.is_sqlite:
            config = {"echo": self.config.echo}
            # In-memory databases live and die with their only connection
            if self.config.database == ":memory:":
                config["poolclass"] = StaticPool
                config["connect_args"] = {"check_same_thread": False}
            return config

        config = {
            "echo": self.config.echo,
            "pool_size": int(os.getenv("DB_POOL_SIZE", CONNECTION_POOL_DEFAULTS["pool_size"])),
            "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", CONNECTION_POOL_DEFAULTS["max_overflow"])),
            "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", CONNECTION_POOL_DEFAULTS["pool_timeout"])),
            "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", CONNECTION_POOL_DEFAULTS["pool_recycle"])),
            "pool_pre_ping": True,  # Verify connections before use
        }

        # Use NullPool for serverless environments
        if os.getenv("SERVERLESS", "false").lower() == "true":
            config["poolclass"] = NullPool
            config.pop("pool_size", None)
            config.pop("max_overflow", None)

        return config

    def initialize(self, **engine_kwargs) -> None:
        """Initialize the database engine and session factory.

        Args:
            **engine_kwargs: Additional arguments for create_engine
        """
        if self._engine is not None:
            return

        config = {**self._engine_config(), **engine_kwargs}
        engine = create_engine(self.config.url, **config)

        if self.config.is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        # Test connection and validate compatibility
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
                logger.info("Database connection established")

                if engine.dialect.name == "postgresql":
                    validate_database_compatibility_sync(conn.connection.dbapi_connection)
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            engine.dispose()
            raise

        self._engine = engine
        self._sessionmaker = sessionmaker(
            bind=engine,
            expire_on_commit=False,
            autoflush=False,
        )

    def close(self) -> None:
        """Close the database engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database connection closed")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get a database session.

        Commits when the block exits cleanly, rolls back and re-raises
        otherwise.

        Yields:
            Session: Database session for executing queries

        Example:
            with db_manager.get_session() as session:
                forests = forests_for_state(session, "AL")
        """
        if self._sessionmaker is None:
            self.initialize()

        with self._sessionmaker() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Get a session with explicit transaction control.

        Use this to make a resolve-then-insert sequence atomic.

        Example:
            with db_manager.transaction() as session:
                load_forests(session, [("Geneva", 7120)], "AL")
                load_forest_activities(session, "Geneva", ["hiking"])
                # Commits on exit, rolls back on exception
        """
        if self._sessionmaker is None:
            self.initialize()

        with self._sessionmaker() as session:
            with session.begin():
                yield session

    def health_check(self) -> bool:
        """Check if database is accessible.

        Returns:
            bool: True if database is healthy
        """
        try:
            with self.get_session() as session:
                result = session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance.

    Returns:
        DatabaseManager: Global database manager
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


@contextmanager
def get_session() -> Iterator[Session]:
    """Get a database session from the global manager.

    Example:
        with get_session() as session:
            activities_for_forest(session, "Geneva")
    """
    db_manager = get_db_manager()
    with db_manager.get_session() as session:
        yield session


def init_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """Initialize the global database manager.

    Should be called during application startup.
    """
    global _db_manager
    if config is not None:
        close_db()
        _db_manager = DatabaseManager(config)
    db_manager = get_db_manager()
    db_manager.initialize()
    return db_manager


def close_db() -> None:
    """Close the global database manager.

    Should be called during application shutdown.
    """
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None

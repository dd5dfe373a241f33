"""
Parking Normalizer - Database Connection Management
Provides a pooled SQLAlchemy asyncio engine and scoped sessions for MySQL.

A reconciliation run acquires one session from session_scope() and passes
it explicitly to the repositories; nothing in the core reaches for a
global connection.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..models.base import Base
from ..utils.config import (
    DATABASE_URL, DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD,
    DB_POOL_SIZE, DB_POOL_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_PRE_PING,
    config
)
from ..utils.logger import logger, log_database_error


def build_database_url() -> URL:
    """
    Build the connection URL from configuration.

    DATABASE_URL wins when set; otherwise a mysql+aiomysql URL is assembled
    with URL.create() so the password never appears in a log line.
    """
    if DATABASE_URL:
        return make_url(DATABASE_URL)
    return URL.create(
        drivername="mysql+aiomysql",
        username=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_NAME,
        query={"charset": "utf8mb4"},
    )


class DatabaseConnection:
    """
    Manages the async engine and session factory.

    Features:
    - Connection pooling for server databases
    - Automatic connection recycling (every hour)
    - Health checks before connection use (pool_pre_ping)
    """

    def __init__(self, url: Optional[Union[str, URL]] = None):
        self._url = make_url(url) if url is not None else None
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    def get_engine(self) -> AsyncEngine:
        """
        Get or create the async engine.

        Raises:
            DatabaseConnectionError: If the engine cannot be created
        """
        if self._engine is None:
            url = self._url or build_database_url()
            try:
                if url.get_backend_name() == "sqlite":
                    self._engine = create_async_engine(url, echo=False)
                else:
                    self._engine = create_async_engine(
                        url,
                        pool_size=DB_POOL_SIZE,
                        max_overflow=DB_POOL_MAX_OVERFLOW,
                        pool_recycle=DB_POOL_RECYCLE,
                        pool_pre_ping=DB_POOL_PRE_PING,
                        echo=False,
                        hide_parameters=True,
                    )
                self._session_factory = async_sessionmaker(
                    self._engine,
                    expire_on_commit=False,
                    autoflush=True,
                )

                logger.info("Database engine initialized", extra={
                    "backend": url.get_backend_name(),
                    "host": url.host,
                    "database": url.database,
                    "environment": config.environment
                })

            except Exception as e:
                log_database_error(e, "Failed to create database engine")
                raise DatabaseConnectionError(f"Failed to create database engine: {e}") from e

        return self._engine

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """
        Scoped session for one unit of work.

        Commits on success, rolls back and re-raises on error. The error
        itself is logged by whoever handles it.

        Example:
            >>> async with db.session_scope() as session:
            ...     driver = ReconciliationDriver(session)
            ...     await driver.run_recent_window()
        """
        self.get_engine()
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.warning("Transaction rolled back")
            raise
        finally:
            await session.close()

    async def create_schema(self):
        """Create any missing tables (fresh databases and tests)."""
        engine = self.get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            async with self.get_engine().connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                result.fetchone()
            logger.info("Database connection test successful")
            return True
        except Exception as e:
            logger.error("Database connection test failed", extra={
                "error": str(e)
            })
            return False

    async def close(self):
        """Close all connections in the pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection pool closed")


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass

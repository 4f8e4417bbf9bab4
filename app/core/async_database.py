"""
Async database session management
"""
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging

from config.settings import DatabaseConfig, get_database_config
from app.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class AsyncDatabaseManager:
    """Async database session manager"""

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or get_database_config()

        if self.config.is_sqlite:
            # a single shared connection keeps in-memory databases alive
            self.engine = create_async_engine(
                self.config.url,
                echo=self.config.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                self.config.url,
                echo=self.config.echo,
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_pre_ping=True,
            )

        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info("Async database manager initialised")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Async database session; commits on success, rolls back on error"""
        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables that do not exist yet"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self):
        """Dispose the engine"""
        await self.engine.dispose()
        logger.info("Async database engine disposed")


# global instance
_async_db_manager = None


def get_async_db_manager() -> AsyncDatabaseManager:
    """Async database manager instance"""
    global _async_db_manager
    if _async_db_manager is None:
        _async_db_manager = AsyncDatabaseManager()
    return _async_db_manager


def set_async_db_manager(manager: AsyncDatabaseManager) -> None:
    """Replace the global manager (tests, scripts)"""
    global _async_db_manager
    _async_db_manager = manager


def reset_async_db_manager():
    """Async database manager reset"""
    global _async_db_manager
    _async_db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency"""
    async_db_manager = get_async_db_manager()
    async with async_db_manager.get_session() as session:
        yield session

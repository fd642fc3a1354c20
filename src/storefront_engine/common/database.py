"""Async database manager for Storefront-Engine (single-DB)."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront_engine.common.config import StorefrontSettings, get_settings
from storefront_engine.common.models import Base
from storefront_engine.common.store import AdminRowStore, RowStore

# Import all model modules so Base.metadata is complete for create_all().
import storefront_engine.identity.models  # noqa: F401
import storefront_engine.categories.models  # noqa: F401
import storefront_engine.tenants.models  # noqa: F401
import storefront_engine.catalog.models  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages a single async database engine and hands out store handles."""

    def __init__(self, settings: StorefrontSettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        url = self._settings.db_url
        self.engine = create_async_engine(url, echo=False)
        self._session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager.init() has not been called")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def store(self) -> AsyncGenerator[RowStore, None]:
        """Tenant-scoped store handle."""
        async with self.get_session() as session:
            yield RowStore(session)

    @asynccontextmanager
    async def admin_store(self) -> AsyncGenerator[AdminRowStore, None]:
        """Privileged store handle. Only super-admin paths and provisioning use it."""
        async with self.get_session() as session:
            yield AdminRowStore(session)

    async def ping(self) -> bool:
        """Round-trip a trivial query; False when the database is unreachable."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False
        return True

    async def create_all(self) -> None:
        if self.engine is None:
            raise RuntimeError("DatabaseManager.init() has not been called")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None

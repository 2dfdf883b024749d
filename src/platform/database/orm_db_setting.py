"""
SQLAlchemy async engine and session management for the Ticket Store

The validator only ever reads today's tickets and narrows its writes to the
validation fields of rows it already holds, so a single primary engine with a
small pool is enough.

The engine is bound to the event loop that first used it. A loop change (test
runners, anyio portals) drops the old engine and builds a new one to avoid
"Future attached to a different loop" errors.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
            self._engine = self._create_engine()
            self._session_maker = None
            self._loop = current_loop
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            Logger.base.info('🗄️ [DB] Engine disposed')
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self._settings.DATABASE_URL_ASYNC,
            echo=False,
            pool_size=self._settings.DB_POOL_SIZE,
            max_overflow=self._settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=self._settings.DB_POOL_TIMEOUT,
            pool_recycle=self._settings.DB_POOL_RECYCLE,
            pool_pre_ping=self._settings.DB_POOL_PRE_PING,
        )


class Base(DeclarativeBase):
    pass


class Database:
    """Session provider handed to repositories through the DI container."""

    def __init__(self, *, settings: Settings = default_settings) -> None:
        self._engine_manager = AsyncEngineManager(settings=settings)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; the sessionmaker context rolls back on exception."""
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session

    async def dispose(self) -> None:
        await self._engine_manager.dispose()

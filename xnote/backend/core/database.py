"""
Database Lifecycle.

SQLAlchemy async engine and session management, owned by an explicit
Database object. The application lifespan connects it on startup, stores
it on app.state.database and disposes it on shutdown. Request handlers
receive sessions through the get_db_session dependency; background jobs
open sessions with Database.session().
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from xnote.backend.core.exceptions import DatabaseError
from xnote.backend.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    """
    Owner of the async engine and session factory.

    Engine creation is deferred to connect() so that constructing the
    object never touches the network.
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "Database":
        """Wrap an existing engine (used by tests and scripts)."""
        database = cls(str(engine.url))
        database._engine = engine
        database._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return database

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """
        Create the engine and verify the store answers.

        A failed ping is logged and re-raised as DatabaseError; the engine
        stays in place so later requests can succeed once the store is back.
        """
        if self._engine is None:
            self._engine = create_async_engine(self.url, **self._engine_kwargs)
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.debug("Database engine created", extra={"driver": self._engine.url.drivername})

        try:
            await self.ping()
        except SQLAlchemyError as e:
            logger.error("Database connection failed", extra={"error": str(e)})
            raise DatabaseError("Database unavailable") from e

        logger.info("Database connected", extra={"driver": self._engine.url.drivername})

    async def disconnect(self) -> None:
        """Dispose the engine and its connection pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    async def create_tables(self) -> None:
        """Create any missing tables for the registered models."""
        from xnote.backend.models import Base

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Table creation failed", extra={"error": str(e)})
            raise DatabaseError("Database unavailable") from e

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Open a session that commits on success and rolls back on error.

        Usage:
            async with database.session() as session:
                ...
        """
        if self._session_factory is None:
            raise DatabaseError("Database is not connected")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


def create_database() -> Database:
    """Build the application Database from config/settings/database.yaml and secrets."""
    from xnote.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    engine_kwargs: dict[str, Any] = {"echo": db_config.echo}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
        )
    return Database(url, **engine_kwargs)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session

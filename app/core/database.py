# app/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory for one application instance.

    Created in the application lifespan and disposed on shutdown; nothing is
    connected at import time.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
    ):
        self.url = url
        engine_kwargs = {"echo": echo}

        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if make_url(url).database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=60,
                pool_recycle=1800,
                pool_pre_ping=True,
            )

        self.engine = create_async_engine(url, **engine_kwargs)

        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )

    async def create_all(self):
        """Create all tables. Used by tests and the demo seed; production uses Alembic."""
        from ..models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Fast health check"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def dispose(self):
        """Properly close all database connections"""
        await self.engine.dispose()
        logger.info("Database connections closed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    database: Database = request.app.state.db
    async with database.session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise

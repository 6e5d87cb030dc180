"""Async SQLAlchemy engine, session factory and FastAPI session dependency"""

from typing import AsyncGenerator

import structlog
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from perspectize.config import Settings, sanitize_dsn, validate_database_url

logger = structlog.get_logger()

Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine described by the settings."""
    validate_database_url(settings.database_url)

    options = {"echo": settings.db_echo, "future": True}
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True
        )

    logger.info("Creating database engine", dsn=sanitize_dsn(settings.database_url))
    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    import perspectize.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to the application's engine."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session

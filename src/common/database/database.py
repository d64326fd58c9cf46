# src/common/database/database.py

import logging
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.common.config import settings

logger = logging.getLogger(__name__)

def _engine_options(url: str) -> dict:
    options = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )
    if url.startswith("postgresql+asyncpg"):
        options["connect_args"] = {"command_timeout": settings.DB_COMMAND_TIMEOUT}
    return options

# Process-wide engine and session factory; connections are opened lazily.
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
async_session = async_sessionmaker(engine, expire_on_commit=False)

async def connect_to_db() -> None:
    """
    Verify the database is reachable. Called once from the application lifespan.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection established (%s)", engine.url.render_as_string(hide_password=True))

async def close_db_connection() -> None:
    await engine.dispose()
    logger.info("Database connection pool closed")

def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory. Components that run queries
    concurrently (search repositories, GraphQL loaders) open one session per call.
    """
    return async_session

async def get_db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session

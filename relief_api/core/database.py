"""
Database engine and session management

PostgreSQL (asyncpg) in deployments, sqlite (aiosqlite) for local runs and tests.
"""

from typing import Any, AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
import structlog

from relief_api.core.config import DATABASE_CONFIG, settings

logger = structlog.get_logger()


def _async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.ENVIRONMENT == "development" and settings.DEBUG}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        # One shared connection, otherwise each session gets its own empty :memory: database
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        return options

    options.update(DATABASE_CONFIG)
    options["connect_args"] = {"server_settings": {"application_name": "relief-api"}}
    return options


database_url = _async_url(settings.DATABASE_URL)
engine = create_async_engine(database_url, **_engine_options(database_url))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Request-scoped session

    Commits once the endpoint returns, rolls back if anything downstream raised.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database_health() -> bool:
    try:
        async with engine.connect() as conn:
            return (await conn.execute(text("SELECT 1"))).scalar() == 1
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return False


async def init_database():
    """Create the users, audit_logs and system_settings tables if missing"""
    # Registers every model on Base.metadata
    from relief_api.models import audit_log, system_setting, user  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise

    logger.info("Database initialized", tables=sorted(Base.metadata.tables))


async def close_database():
    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error("Error closing database connections", error=str(e))

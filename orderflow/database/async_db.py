import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from orderflow.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_async_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_async_database_engine(database_url: str | None = None, settings: Settings | None = None) -> AsyncEngine:
    """Create the async database engine"""
    settings = settings or get_settings()
    database_url = database_url or settings.async_database_url
    url = make_url(database_url)

    base_config: dict[str, Any] = {
        "echo": settings.DB_ECHO,
        "future": True,
    }

    if url.get_backend_name() == "sqlite":
        # SQLite: one connection per session, wait on locks instead of failing fast
        logger.info("Creating async database engine for SQLite (NullPool)")
        engine_config = {
            **base_config,
            "poolclass": NullPool,
            "connect_args": {"timeout": settings.DB_POOL_TIMEOUT},
        }
    elif settings.is_development:
        logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
        engine_config = {
            **base_config,
            "poolclass": NullPool,
            "pool_pre_ping": True,
        }
    else:
        logger.info("Creating async database engine for PRODUCTION (QueuePool)")
        engine_config = {
            **base_config,
            "poolclass": AsyncAdaptedQueuePool,
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
        }

    try:
        engine = create_async_engine(database_url, **engine_config)
    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise

    if url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_async_engine() -> AsyncEngine:
    """Process-wide engine, created on first use"""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_database_engine()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Process-wide session factory, created on first use"""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_async_engine())
    return _session_factory


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create all tables (development and tests; production uses Alembic)"""
    from orderflow.models.db import Base

    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def close_db_connections() -> None:
    """Dispose the process-wide engine"""
    global _async_engine, _session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Async database engine disposed")
    _async_engine = None
    _session_factory = None

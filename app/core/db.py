import logging
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings
from app.models.base import Base
from app.models import movie, user  # noqa: F401  регистрируем таблицы в Base.metadata


logger = logging.getLogger(__name__)


_engine: AsyncEngine | None = None
_SessionLocal: async_sessionmaker[AsyncSession] | None = None


def _to_async_url(url: str) -> str:
    # sqlite:///movies.db -> sqlite+aiosqlite:///movies.db
    # postgresql://... -> postgresql+asyncpg://...
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """aiosqlite сам шлёт BEGIN и ломает SAVEPOINT, поэтому BEGIN отправляем сами."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def configure_engine(url: str | None = None, **engine_kw: Any) -> AsyncEngine:
    """Создаёт движок и фабрику сессий (заменяя прежние, если были)."""
    global _engine, _SessionLocal

    async_url = _to_async_url(url or settings.DATABASE_URL)
    engine_kw.setdefault("echo", settings.SQL_ECHO)
    _engine = create_async_engine(async_url, **engine_kw)
    if _engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(_engine)

    _SessionLocal = async_sessionmaker(
        _engine, expire_on_commit=False, autoflush=False
    )
    logger.info("SQLAlchemy async engine initialized (%s)", _engine.url.render_as_string())
    return _engine


def init_engine_if_needed() -> AsyncEngine:
    """Инициализация движка один раз (лениво)."""
    if _engine is None or _SessionLocal is None:
        return configure_engine()
    return _engine


async def init_models() -> None:
    """Создаёт таблицы, если их ещё нет. Миграций нет."""
    engine = init_engine_if_needed()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine() -> None:
    global _engine, _SessionLocal
    if _engine is not None:
        await _engine.dispose()
        logger.info("SQLAlchemy async engine disposed")
    _engine = None
    _SessionLocal = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: выдаёт AsyncSession и корректно закрывает её."""
    if _SessionLocal is None:
        init_engine_if_needed()
    assert _SessionLocal is not None  # для type-checker
    async with _SessionLocal() as session:
        yield session

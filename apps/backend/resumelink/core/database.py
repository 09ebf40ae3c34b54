from typing import AsyncGenerator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from .config import settings


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": settings.DB_ECHO}
    if url.startswith("sqlite"):
        # one connection per checkout; aiosqlite connections must not outlive their event loop
        kwargs["poolclass"] = NullPool
    return kwargs


sync_engine = create_engine(settings.SYNC_DATABASE_URL, **_engine_kwargs(settings.SYNC_DATABASE_URL))
async_engine = create_async_engine(
    settings.ASYNC_DATABASE_URL, **_engine_kwargs(settings.ASYNC_DATABASE_URL)
)

_enable_sqlite_foreign_keys(sync_engine)
_enable_sqlite_foreign_keys(async_engine.sync_engine)

SessionLocal = sessionmaker(bind=sync_engine, expire_on_commit=False)
AsyncSessionLocal = async_sessionmaker(bind=async_engine, expire_on_commit=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


async def init_models(base, drop: bool = False) -> None:
    """Create every table registered on *base*, optionally dropping them first."""
    async with async_engine.begin() as conn:
        if drop:
            await conn.run_sync(base.metadata.drop_all)
        await conn.run_sync(base.metadata.create_all)

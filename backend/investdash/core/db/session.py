from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache
import importlib

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from investdash.core.config import settings
from investdash.core.db.base import Base


def import_model_modules() -> None:
    module_names = [
        "investdash.core.db.models",
        "investdash.domain.portfolio.models.products",
        "investdash.domain.portfolio.models.investments",
        "investdash.domain.portfolio.models.projections",
    ]
    for module_name in module_names:
        importlib.import_module(module_name)


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    # Lazy init: the engine is only built when the first session is requested.
    return create_async_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)


def get_session_local(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine or get_engine(),
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def create_tables(engine: AsyncEngine | None = None) -> None:
    import_model_modules()
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine | None = None) -> None:
    import_model_modules()
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_local()() as db:
        yield db

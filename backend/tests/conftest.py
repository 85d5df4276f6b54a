from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Make `backend/` importable regardless of pytest import mode.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from investdash.core.config import settings
from investdash.core.db.session import create_tables, get_db, get_session_local
from investdash.domain.portfolio.store.sqlalchemy_store import SqlAlchemyRecordStore
from investdash.main import create_app
from investdash.shared.enums import Env
from scripts.seed_portfolio import seed_portfolio


@pytest.fixture()
def actor():
    def _headers(user_id: str) -> dict[str, str]:
        return {settings.dev_actor_header: json.dumps({"user_id": user_id})}

    return _headers


@pytest_asyncio.fixture()
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with get_session_local(db_engine)() as session:
        yield session


@pytest_asyncio.fixture()
async def store(db_session: AsyncSession) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db_session)


@pytest_asyncio.fixture()
async def seeded_store(store: SqlAlchemyRecordStore) -> SqlAlchemyRecordStore:
    await seed_portfolio(store)
    return store


@pytest.fixture()
def db_url(tmp_path) -> str:
    # File database: the TestClient runs requests on its own event loop, so
    # connections are opened per request (NullPool) instead of shared.
    url = f"sqlite+aiosqlite:///{tmp_path / 'investdash.db'}"

    async def _prepare() -> None:
        engine = create_async_engine(url, poolclass=NullPool)
        try:
            await create_tables(engine)
            async with get_session_local(engine)() as session:
                await seed_portfolio(SqlAlchemyRecordStore(session))
        finally:
            await engine.dispose()

    asyncio.run(_prepare())
    return url


@pytest.fixture()
def client(db_url: str) -> Generator[TestClient, None, None]:
    settings.env = Env.dev
    app = create_app()
    engine = create_async_engine(db_url, poolclass=NullPool)
    session_local = get_session_local(engine)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_local() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    asyncio.run(engine.dispose())

"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database file (aiosqlite driver) and the
HTTP tests talk to the app through TestClient with the database session
and the caller's identity swapped out.
"""

import asyncio
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-clarity.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from clarity.core.dependencies import get_current_user
from clarity.db.base import Base
from clarity.db.session import get_db
from clarity.main import app
from clarity.schemas.user import CurrentUser
import clarity.models  # noqa: F401  registers tables on Base.metadata


USER_A = CurrentUser(
    id=uuid.UUID("11111111-1111-4111-8111-111111111111"),
    email="ada@example.com",
    user_metadata={"full_name": "Ada Lovelace", "avatar_url": "https://example.com/ada.png"},
)
USER_B = CurrentUser(
    id=uuid.UUID("22222222-2222-4222-8222-222222222222"),
    email="grace@example.com",
    user_metadata={"name": "Grace", "picture": "https://example.com/grace.png"},
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no database")
    config.addinivalue_line("markers", "db: uses a throwaway SQLite database")
    config.addinivalue_line("markers", "api: goes through the HTTP layer")


def run(coro):
    """Drive a coroutine to completion from a sync test."""
    return asyncio.run(coro)


async def _create_schema(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clarity.db'}", poolclass=NullPool)
    run(_create_schema(engine))
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    run(engine.dispose())


class CallerSwitch:
    """Which user the overridden auth dependency returns."""

    def __init__(self, user: CurrentUser):
        self.user = user

    def __call__(self) -> CurrentUser:
        return self.user


@pytest.fixture
def caller():
    return CallerSwitch(USER_A)


@pytest.fixture
def client(session_factory, caller):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = caller
    yield TestClient(app)
    app.dependency_overrides.clear()

"""Pytest configuration and shared fixtures."""

import os
from typing import AsyncGenerator

# Point the app at an in-memory database before anything imports settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENV"] = "development"
os.environ.pop("SMTP_HOST", None)

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.db.init_db import init_db
from app.db.session import engine
from app.main import app


@pytest_asyncio.fixture
async def db_ready() -> AsyncGenerator[None, None]:
    """Fresh schema per test; disposing the pool drops the in-memory database."""
    await init_db(engine)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_ready) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

"""Shared pytest fixtures for docsync tests."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import docsync.db.models  # noqa: F401
from docsync.core.db import Base
from fakes import FakeDocumentStore, make_document


@pytest.fixture
def draft():
    return make_document()


@pytest.fixture
def store(draft):
    return FakeDocumentStore([draft])


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite database with the document schema."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()

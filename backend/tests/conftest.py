"""
Pytest configuration and shared fixtures for the Article backend tests.

Every test gets its own in-memory SQLite database, so no test depends on
another test's leftovers and tests may run in parallel.
"""
import pytest
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import db_models  # noqa: F401  (registers tables on Base.metadata)
from database import Base
from db_models import Article, User
from services import article_service, user_service


# ── Database Fixtures ────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Session factory bound to a fresh in-memory SQLite database.

    Uses StaticPool so every session sees the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def reload_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A second, independent session for reading records back from the store."""
    async with session_factory() as session:
        yield session


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest.fixture
def user_fields() -> dict:
    return {
        "first_name": "Full",
        "last_name": "Name",
        "display_name": "Full Name",
        "email": "test@test.com",
        "username": "username",
        "password": "M3@n.jsI$Aw3$0m3",
    }


@pytest.fixture
async def saved_user(db_session: AsyncSession, user_fields: dict):
    """
    A user persisted before the test, then every article and user removed
    after it.
    """
    user = User(**user_fields)
    await user_service.save_user(db_session, user)

    yield user

    await article_service.remove_all_articles(db_session)
    await user_service.remove_all_users(db_session)


@pytest.fixture
def article(saved_user: User) -> Article:
    """An unsaved article owned by saved_user."""
    return Article(
        title="Article Title",
        content="Article Content",
        user=saved_user,
    )

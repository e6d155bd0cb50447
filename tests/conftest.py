"""Shared test fixtures — async DB, client, API-key helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL. Every test
gets a fresh engine, a fresh app and therefore a fresh rate limiter.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from chat_backend.common.constants import MessageRole
from chat_backend.config import Settings
from chat_backend.database import Base, get_db
from chat_backend.main import create_app

# Import ALL model modules so create_all sees both tables and the foreign key
import chat_backend.messages.models  # noqa: F401
import chat_backend.sessions.models  # noqa: F401
from chat_backend.messages.models import ChatMessage
from chat_backend.sessions.models import ChatSession

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_API_KEY = "test-api-key"


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


def make_settings(**overrides) -> Settings:
    values = dict(
        API_KEY=TEST_API_KEY,
        RATE_LIMIT=60,
        RATE_LIMIT_WINDOW_MS=60_000,
        ENVIRONMENT="test",
        LOG_LEVEL="warning",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ── Test database (SQLite in-memory) ────────────────────────────────

@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create all tables on a private in-memory engine; drop them after."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.commit()


# ── FastAPI test client ─────────────────────────────────────────────

def build_app(session_factory: async_sessionmaker, app_settings: Optional[Settings] = None):
    """Create a fresh app with the DB dependency pointed at *session_factory*."""
    application = create_app(app_settings or make_settings())

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    application.dependency_overrides[get_db] = _override_get_db
    return application


@pytest.fixture
async def app(session_factory):
    application = build_app(session_factory)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"X-API-Key": TEST_API_KEY}


# ── Model factories ─────────────────────────────────────────────────

async def seed_session(
    db: AsyncSession,
    *,
    user_id: str = "user123",
    title: Optional[str] = "Test Session",
    favorite: bool = False,
) -> ChatSession:
    session = ChatSession(user_id=user_id, title=title, favorite=favorite)
    db.add(session)
    await db.commit()
    return session


async def seed_message(
    db: AsyncSession,
    session_id,
    *,
    role: MessageRole = MessageRole.user,
    content: str = "Hello, how are you?",
) -> ChatMessage:
    message = ChatMessage(session_id=session_id, role=role, content=content)
    db.add(message)
    await db.commit()
    return message

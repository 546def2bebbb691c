"""Shared pytest fixtures for API, database and service tests."""

import os

# Must be set before urlshortener modules build the settings and the engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "test")

import itertools
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from urlshortener.config import Settings, get_settings
from urlshortener.database import Base, get_db
from urlshortener.dependencies import get_token_generator
from urlshortener.main import app
from urlshortener.tokens import RandomTokenGenerator


class FixedTokenGenerator(RandomTokenGenerator):
    """Hands out a fixed cycle of tokens instead of random ones."""

    def __init__(self, *tokens: str) -> None:
        super().__init__()
        self.calls = 0
        self._tokens = itertools.cycle(tokens)

    def generate(self, alphabet: str, length: int) -> str:
        self.calls += 1
        return next(self._tokens)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        BASE_URL="http://s/",
        TOKEN_CHARACTERS="abc",
        TOKEN_LENGTH=3,
        TOKEN_MAX_ATTEMPTS=5,
        DATABASE_URL="sqlite+aiosqlite://",
        DEFAULT_LOCALE="en",
    )


@pytest.fixture
def token_generator() -> RandomTokenGenerator:
    return RandomTokenGenerator()


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    test_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with test_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession, settings: Settings, token_generator: RandomTokenGenerator
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_token_generator] = lambda: token_generator

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def use_tokens(client: AsyncClient):
    """Make the app hand out the given tokens in order, cycling when exhausted."""

    def install(*tokens: str) -> FixedTokenGenerator:
        generator = FixedTokenGenerator(*tokens)
        app.dependency_overrides[get_token_generator] = lambda: generator
        return generator

    return install

"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the database, units of work,
bearer tokens and HTTP clients.
"""

import os
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Set required environment variables for testing before importing app modules
os.environ.setdefault("AUTH_AUDIENCE", "api://test-client")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE_PATH", os.devnull)

from fastapi import APIRouter, FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jwcrypto import jwk, jwt  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

import library_api.models  # noqa: E402,F401
from library_api.repositories.retry import RetryPolicy  # noqa: E402
from library_api.storage.images import ImageStorage  # noqa: E402
from library_api.storage.unit_of_work import UnitOfWork  # noqa: E402
from library_api.utils.error_handler import (  # noqa: E402
    register_exception_handlers,
)

TEST_AUDIENCE = os.environ["AUTH_AUDIENCE"]


@pytest_asyncio.fixture
async def db_engine():
    """
    Provides an in-memory SQLite engine with every table created.

    A StaticPool keeps the single connection alive for the whole test so
    all sessions see the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def no_wait_policy():
    """
    Provides a RetryPolicy that records its backoff instead of sleeping.

    Returns:
        RetryPolicy: Policy whose ``sleep`` is an AsyncMock.
    """
    return RetryPolicy(max_retries=3, base_delay=1.0, sleep=AsyncMock())


@pytest_asyncio.fixture
async def uow(session_factory, no_wait_policy):
    """
    Provides a UnitOfWork bound to the in-memory database.

    Yields:
        UnitOfWork: Disposed after the test.
    """
    unit_of_work = UnitOfWork(session_factory, no_wait_policy)
    yield unit_of_work
    await unit_of_work.dispose()


@pytest.fixture
def new_uow(session_factory, no_wait_policy):
    """
    Factory for extra units of work, used to check what was committed.

    Returns:
        Callable returning a fresh UnitOfWork.
    """

    def factory() -> UnitOfWork:
        return UnitOfWork(session_factory, no_wait_policy)

    return factory


@pytest.fixture
def image_storage(tmp_path):
    return ImageStorage(tmp_path / "media")


@pytest.fixture
def signing_key():
    return jwk.JWK.generate(kty="oct", size=256)


@pytest.fixture
def make_token(signing_key):
    """
    Factory for signed compact tokens.

    Returns:
        Callable taking claim overrides and returning a serialized token.
    """

    def factory(**claims) -> str:
        payload = {
            "sub": "f86caf01-69b4-4892-ba2d-ffa58fdd5dab",
            "preferred_username": "testuser",
            "aud": TEST_AUDIENCE,
            "exp": 9999999999,
        }
        payload.update(claims)
        token = jwt.JWT(header={"alg": "HS256"}, claims=payload)
        token.make_signed_token(signing_key)
        return token.serialize()

    return factory


@pytest.fixture
def auth_headers(make_token):
    """
    Provides HTTP headers with a token accepted by AuthBackend.

    Returns:
        dict: Headers dictionary with Authorization header
    """
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def make_client():
    """
    Factory for TestClients around a single router.

    The app has the exception handlers registered but no authentication,
    and services can be replaced through dependency overrides.

    Returns:
        Callable[[APIRouter, dict], TestClient]
    """

    def factory(router: APIRouter, overrides: dict | None = None) -> TestClient:
        app = FastAPI()
        app.include_router(router)
        register_exception_handlers(app)
        app.dependency_overrides.update(overrides or {})
        return TestClient(app, raise_server_exceptions=False)

    return factory

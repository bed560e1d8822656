"""Shared test fixtures."""

# ruff: noqa: E402  -- settings read the environment at import time
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SALT_ROUNDS", "4")

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.sm_common.database import get_db_session
from src.sm_gateway.auth.jwt_handler import create_access_token
from tests.fakes import RecordingSession


@pytest.fixture
def db_session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
async def client(db_session: RecordingSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for the FastAPI app; lifespan is not run, the DB session is faked."""

    async def _db_override() -> AsyncIterator[RecordingSession]:
        yield db_session

    app.dependency_overrides[get_db_session] = _db_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(1)}"}

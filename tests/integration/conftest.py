"""Integration-test fixtures (real PostgreSQL from the DB_* settings).

Pre-condition: a reachable PostgreSQL; tests are skipped otherwise.
Each test gets its own engine so the asyncpg pool never crosses event loops.
"""

import uuid
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.sm_common.bootstrap import create_tables
from src.sm_common.database import build_engine, build_session_factory
from src.sm_gateway.user.db_models import UserModel


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = build_engine(settings)
    try:
        await create_tables(engine)
    except (OSError, SQLAlchemyError) as exc:
        await engine.dispose()
        pytest.skip(f"PostgreSQL not reachable: {exc}")
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def funded_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[int]:
    """A throwaway user with balance 1000, removed after the test."""
    email = f"ledger_{uuid.uuid4().hex[:8]}@example.com"
    async with session_factory() as db, db.begin():
        result = await db.execute(
            insert(UserModel)
            .values(balance=1000, email=email, password="x")
            .returning(UserModel.id)
        )
        user_id = result.scalar_one()
    yield user_id
    async with session_factory() as db, db.begin():
        await db.execute(delete(UserModel).where(UserModel.id == user_id))

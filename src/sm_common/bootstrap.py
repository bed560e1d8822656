"""Startup schema bootstrap: create tables if missing, seed demo users if empty.

Idempotent, so every process start runs it.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.sm_catalog.infrastructure.db_models import ItemModel
from src.sm_common.database import Base
from src.sm_gateway.auth.password import hash_password
from src.sm_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"
DEMO_BALANCE = 1000
DEMO_EMAILS = ("test@example.com", "test2@example.com", "test3@example.com")


async def create_tables(engine: AsyncEngine) -> None:
    tables = [UserModel.__table__, ItemModel.__table__]
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=tables, checkfirst=True)


async def seed_demo_users(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert the demo accounts when the users table is empty. Returns rows inserted."""
    async with session_factory() as db, db.begin():
        count = (await db.execute(select(func.count()).select_from(UserModel))).scalar_one()
        if count:
            return 0
        password_hash = hash_password(DEMO_PASSWORD)
        db.add_all(
            UserModel(balance=DEMO_BALANCE, email=email, password=password_hash)
            for email in DEMO_EMAILS
        )
    logger.info("Seeded %d demo users", len(DEMO_EMAILS))
    return len(DEMO_EMAILS)


async def bootstrap(
    engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    await create_tables(engine)
    await seed_demo_users(session_factory)

"""UserRepository: concrete implementation of UserRepositoryProtocol.

Transaction ownership: the CALLER (LedgerService) opens the transaction with
`async with db.begin()`. get_user_for_update takes a PostgreSQL row lock that
is held until that transaction commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import User
from src.sm_common.errors import InternalError

_LIST_USERS_SQL = text("""
    SELECT id, balance, email
    FROM users
    ORDER BY id
""")

_GET_USER_SQL = text("""
    SELECT id, balance, email
    FROM users
    WHERE id = :user_id
""")

_GET_USER_FOR_UPDATE_SQL = text("""
    SELECT id, balance, email
    FROM users
    WHERE id = :user_id
    FOR UPDATE
""")

_UPDATE_BALANCE_SQL = text("""
    UPDATE users
    SET balance = :new_balance
    WHERE id = :user_id
    RETURNING id, balance, email
""")


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
    )


class UserRepository:
    """Concrete repository over raw SQL."""

    async def list_users(self, db: AsyncSession) -> list[User]:
        result = await db.execute(_LIST_USERS_SQL)
        return [_row_to_user(row) for row in result.fetchall()]

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(_GET_USER_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_user_for_update(
        self, db: AsyncSession, user_id: int
    ) -> User | None:
        result = await db.execute(_GET_USER_FOR_UPDATE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def update_balance(
        self, db: AsyncSession, user_id: int, new_balance: int
    ) -> User:
        result = await db.execute(
            _UPDATE_BALANCE_SQL, {"user_id": user_id, "new_balance": new_balance}
        )
        row = result.fetchone()
        if row is None:
            # The row is locked by this transaction, so it cannot vanish in between
            raise InternalError(f"Balance update matched no row for user {user_id}")
        return _row_to_user(row)

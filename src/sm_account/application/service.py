"""LedgerService: atomic balance debit plus read-only user lookups.

debit() owns its transaction: `async with db.begin()` commits on a clean exit
and rolls back on every exception, so no path leaves the row lock held.
Business rejections are raised inside that scope and therefore always unwind
the transaction before they reach the caller. Nothing is retried here.
"""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import User
from src.sm_account.domain.repository import UserRepositoryProtocol
from src.sm_account.infrastructure.persistence import UserRepository
from src.sm_common.errors import (
    AccountNotFoundError,
    DebitRejectedError,
    InsufficientBalanceError,
    StoreError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(self, repo: UserRepositoryProtocol | None = None) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()

    async def list_users(self, db: AsyncSession) -> list[User]:
        return await self._repo.list_users(db)

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        user = await self._repo.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def debit(self, db: AsyncSession, user_id: int, amount: int) -> User:
        """Subtract ``amount`` from the user's balance under a row lock.

        ``amount`` is validated (positive integer) by the HTTP boundary.

        Returns:
            The user row as committed, carrying the new balance.

        Raises:
            AccountNotFoundError: No such user; nothing was written.
            InsufficientBalanceError: balance < amount; nothing was written.
            StoreError: The database connection or transaction control failed.
        """
        try:
            async with db.begin():
                # Concurrent debits on the same user queue up here until we commit/roll back
                user = await self._repo.get_user_for_update(db, user_id)
                if user is None:
                    raise AccountNotFoundError(user_id)
                if user.balance < amount:
                    raise InsufficientBalanceError(amount, user.balance)
                updated = await self._repo.update_balance(
                    db, user_id, user.balance - amount
                )
        except DebitRejectedError as exc:
            logger.warning(
                "Debit rejected: user=%s amount=%s reason=%s",
                user_id,
                amount,
                exc.reason.value,
            )
            raise
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            # asyncpg connect failures arrive as bare OSError / TimeoutError
            logger.exception("Debit failed at the store: user=%s amount=%s", user_id, amount)
            raise StoreError() from exc

        logger.info(
            "Debit committed: user=%s amount=%s balance=%s", user_id, amount, updated.balance
        )
        return updated

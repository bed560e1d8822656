"""UserRepositoryProtocol: the store operations LedgerService needs.

get_user_for_update must lock the row until the caller's transaction ends.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_account.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def list_users(self, db: AsyncSession) -> list[User]: ...

    async def get_user(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_user_for_update(
        self, db: AsyncSession, user_id: int
    ) -> User | None: ...

    async def update_balance(
        self, db: AsyncSession, user_id: int, new_balance: int
    ) -> User: ...

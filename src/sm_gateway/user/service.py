"""User domain service: login and password change.

All DB operations use the injected AsyncSession. change_password manages its
own short transaction; login is read-only.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.sm_common.errors import (
    InvalidCredentialsError,
    InvalidPasswordError,
    SamePasswordError,
    UserNotFoundError,
)
from src.sm_gateway.auth.jwt_handler import create_access_token
from src.sm_gateway.auth.password import hash_password, verify_password
from src.sm_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    async def _get_by_email(self, db: AsyncSession, email: str) -> UserModel:
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(email)
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> str:
        """Authenticate by email + password and return an access token."""
        user = await self._get_by_email(db, email)
        if not verify_password(password, user.password):
            raise InvalidCredentialsError()
        return create_access_token(user.id)

    async def change_password(
        self,
        db: AsyncSession,
        email: str,
        old_password: str,
        new_password: str,
    ) -> None:
        if old_password == new_password:
            raise SamePasswordError()

        user = await self._get_by_email(db, email)
        if not verify_password(old_password, user.password):
            raise InvalidPasswordError()

        user_id = user.id
        new_hash = hash_password(new_password)
        # The lookup above autobegan a transaction on this session; finish it here
        await db.execute(
            update(UserModel).where(UserModel.id == user_id).values(password=new_hash)
        )
        await db.commit()
        logger.info("Password changed: user=%s", user_id)

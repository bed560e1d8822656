"""Pydantic schemas for the users / ledger API.

Request bodies keep the camelCase field names clients already send
(``userId``); responses are plain snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.sm_account.domain.models import User

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BuyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., gt=0, alias="userId")
    # Whole units only: 10.0 is accepted, 10.5 is a validation error
    amount: int = Field(..., gt=0, description="Amount to debit")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    id: int
    balance: int
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, balance=user.balance, email=user.email)


class DebitResponse(BaseModel):
    id: int
    balance: int

    @classmethod
    def from_domain(cls, user: User) -> "DebitResponse":
        return cls(id=user.id, balance=user.balance)

"""Domain models for sm_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class User:
    id: int
    balance: int   # whole currency units, never negative once committed
    email: str

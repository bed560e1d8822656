"""Concurrent debits against an in-memory store with row locks.

The store mimics SELECT ... FOR UPDATE: the lock is taken on read and released
when the session's begin() scope ends. Writes become visible only on commit.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest

from src.sm_account.application.service import LedgerService
from src.sm_account.domain.models import User
from src.sm_common.errors import AccountNotFoundError, InsufficientBalanceError


class LockingStore:
    def __init__(self, balances: dict[int, int]) -> None:
        self.balances = dict(balances)
        self.locks = {user_id: asyncio.Lock() for user_id in balances}


class LockingSession:
    def __init__(self, store: LockingStore) -> None:
        self.store = store
        self.held: list[asyncio.Lock] = []
        self.pending: dict[int, int] = {}

    @asynccontextmanager
    async def begin(self) -> AsyncIterator["LockingSession"]:
        try:
            yield self
        except BaseException:
            self.pending.clear()
            raise
        else:
            self.store.balances.update(self.pending)
        finally:
            for lock in self.held:
                lock.release()
            self.held.clear()


class LockingRepository:
    def __init__(self, store: LockingStore) -> None:
        self.store = store

    async def list_users(self, db):
        return []

    async def get_user(self, db, user_id):
        return None

    async def get_user_for_update(self, db: LockingSession, user_id: int) -> User | None:
        lock = self.store.locks.get(user_id)
        if lock is None:
            return None
        await lock.acquire()
        db.held.append(lock)
        await asyncio.sleep(0)
        return User(id=user_id, balance=self.store.balances[user_id], email=f"u{user_id}@example.com")

    async def update_balance(self, db: LockingSession, user_id: int, new_balance: int) -> User:
        # Let other debits run between the read and the write
        await asyncio.sleep(0)
        db.pending[user_id] = new_balance
        return User(id=user_id, balance=new_balance, email=f"u{user_id}@example.com")


async def _debit(svc: LedgerService, store: LockingStore, user_id: int, amount: int):
    return await svc.debit(LockingSession(store), user_id, amount)


async def test_ten_concurrent_debits_never_overdraw() -> None:
    store = LockingStore({1: 1000})
    svc = LedgerService(LockingRepository(store))

    results = await asyncio.gather(
        *[_debit(svc, store, 1, 150) for _ in range(10)], return_exceptions=True
    )

    succeeded = [r for r in results if isinstance(r, User)]
    rejected = [r for r in results if isinstance(r, InsufficientBalanceError)]
    assert len(succeeded) == 6
    assert len(rejected) == 4
    assert store.balances[1] == 100
    assert sorted(u.balance for u in succeeded) == [100, 250, 400, 550, 700, 850]


async def test_mixed_amounts_balance_matches_successes() -> None:
    store = LockingStore({1: 1000})
    svc = LedgerService(LockingRepository(store))
    amounts = [300, 500, 250, 400, 100, 50, 700]

    results = await asyncio.gather(
        *[_debit(svc, store, 1, amount) for amount in amounts], return_exceptions=True
    )

    spent = sum(
        amount for amount, result in zip(amounts, results) if isinstance(result, User)
    )
    assert store.balances[1] == 1000 - spent
    assert store.balances[1] >= 0


async def test_debits_on_different_users_are_independent() -> None:
    store = LockingStore({1: 1000, 2: 1000})
    svc = LedgerService(LockingRepository(store))

    await asyncio.gather(
        *[_debit(svc, store, 1, 100) for _ in range(3)],
        *[_debit(svc, store, 2, 200) for _ in range(3)],
    )

    assert store.balances == {1: 700, 2: 400}


async def test_unknown_user_changes_nothing() -> None:
    store = LockingStore({1: 1000, 2: 1000})
    svc = LedgerService(LockingRepository(store))

    with pytest.raises(AccountNotFoundError):
        await _debit(svc, store, 3, 100)

    assert store.balances == {1: 1000, 2: 1000}
    assert not any(lock.locked() for lock in store.locks.values())

"""Transactional in-memory store.

Behaves like a small relational store with row-level locking:
- Writes are buffered per transaction and published atomically on commit
- Readers see committed rows plus their own uncommitted writes
- Each account row has a lock owned by at most one transaction until it
  commits or rolls back
- Every call that touches shared state is bounded by ``query_timeout``

Locking uses two phases, as for per-resource locks:
1. ``_row_locks_guard`` protects the lock dictionary during lookup/creation
2. The row lock itself is held by the owning transaction

Limitations:
- Single-process only
- Unbounded memory growth (row locks are never evicted)
"""

from __future__ import annotations

import itertools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING

from ledger_core.application.ports import TransactionalStore, UnitOfWork
from ledger_core.config import DEFAULT_CURRENCIES
from ledger_core.domain.exceptions import StoreError, StoreTimeoutError
from ledger_core.infrastructure.time_provider import SystemTimeProvider

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Mapping
    from datetime import datetime
    from decimal import Decimal

    from ledger_core.application.ports import TimeProvider

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 5.0


@dataclass(frozen=True, slots=True)
class AccountRow:
    id: int
    name: str
    currency_id: int
    amount: Decimal


@dataclass(frozen=True, slots=True)
class PaymentRow:
    id: int
    currency_id: int
    amount: Decimal
    buyer_account_id: int
    seller_account_id: int
    operation_timestamp: datetime


class InMemoryStore(TransactionalStore):
    """In-memory account and payment tables with row locks."""

    def __init__(
        self,
        currencies: Mapping[int, str] | None = None,
        time_provider: TimeProvider | None = None,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ) -> None:
        self._currencies = dict(DEFAULT_CURRENCIES if currencies is None else currencies)
        self._time_provider = time_provider or SystemTimeProvider()
        self._query_timeout = query_timeout

        self._accounts: dict[int, AccountRow] = {}
        self._payments: dict[int, PaymentRow] = {}
        self._account_ids = itertools.count(1)
        self._payment_ids = itertools.count(1)
        self._data_lock = Lock()

        self._row_locks: dict[int, Lock] = {}
        self._row_locks_guard = Lock()

    @property
    def query_timeout(self) -> float:
        return self._query_timeout

    def begin(self) -> InMemoryTransaction:
        return InMemoryTransaction(self)

    def currency_name(self, currency_id: int) -> str | None:
        return self._currencies.get(currency_id)

    @contextmanager
    def _data_access(self) -> Iterator[None]:
        if not self._data_lock.acquire(timeout=self._query_timeout):
            raise StoreTimeoutError(f"Store call exceeded the {self._query_timeout}s deadline")
        try:
            yield
        finally:
            self._data_lock.release()

    def _row_lock(self, account_id: int) -> Lock:
        with self._row_locks_guard:
            if account_id not in self._row_locks:
                self._row_locks[account_id] = Lock()
            return self._row_locks[account_id]


class InMemoryTransaction(UnitOfWork):
    """A single transaction against an InMemoryStore.

    NOT thread-safe: a transaction belongs to one caller at a time.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._account_writes: dict[int, AccountRow] = {}
        self._payment_inserts: list[PaymentRow] = []
        self._held_locks: dict[int, Lock] = {}
        self._closed = False

    @property
    def store(self) -> InMemoryStore:
        return self._store

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def held_locks(self) -> frozenset[int]:
        return frozenset(self._held_locks)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def select_accounts(self, ids: Collection[int] | None = None) -> list[AccountRow]:
        """Return visible account rows ordered by id."""
        self._ensure_open()
        with self._store._data_access():
            rows = dict(self._store._accounts)
        rows.update(self._account_writes)
        if ids is not None:
            rows = {account_id: row for account_id, row in rows.items() if account_id in ids}
        return [rows[account_id] for account_id in sorted(rows)]

    def insert_account(self, name: str, currency_id: int, amount: Decimal) -> int:
        self._ensure_open()
        if self._store.currency_name(currency_id) is None:
            raise StoreError(f"Currency {currency_id} does not exist")
        self._check_balance(amount)
        with self._store._data_access():
            account_id = next(self._store._account_ids)
        # A fresh row is invisible to others until commit, so its lock is free.
        lock = self._store._row_lock(account_id)
        lock.acquire()
        self._held_locks[account_id] = lock
        self._account_writes[account_id] = AccountRow(
            id=account_id, name=name, currency_id=currency_id, amount=amount
        )
        return account_id

    def update_account(self, account_id: int, name: str, amount: Decimal) -> bool:
        """Overwrite name and amount; return False if the row does not exist.

        Waits up to the query timeout for the row lock when another
        transaction holds it.
        """
        self._ensure_open()
        self._check_balance(amount)
        current = self._account_writes.get(account_id)
        if current is None:
            with self._store._data_access():
                current = self._store._accounts.get(account_id)
            if current is None:
                return False
        self._lock_row(account_id)
        self._account_writes[account_id] = AccountRow(
            id=account_id, name=name, currency_id=current.currency_id, amount=amount
        )
        return True

    def lock_accounts_skip_locked(self, ids: Collection[int]) -> set[int]:
        """Lock every free row in ``ids`` without waiting; return the ids now held."""
        self._ensure_open()
        locked: set[int] = set()
        for account_id in sorted(ids):
            if account_id in self._held_locks:
                locked.add(account_id)
                continue
            lock = self._store._row_lock(account_id)
            if lock.acquire(blocking=False):
                self._held_locks[account_id] = lock
                locked.add(account_id)
        return locked

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def select_payments(self) -> list[PaymentRow]:
        """Return visible payment rows ordered by operation time, then id."""
        self._ensure_open()
        with self._store._data_access():
            rows = list(self._store._payments.values())
        rows.extend(self._payment_inserts)
        return sorted(rows, key=lambda row: (row.operation_timestamp, row.id))

    def insert_payment(
        self,
        currency_id: int,
        amount: Decimal,
        buyer_account_id: int,
        seller_account_id: int,
    ) -> PaymentRow:
        self._ensure_open()
        if amount <= 0:
            raise StoreError(f"Payment amount must be positive, got {amount}")
        if buyer_account_id == seller_account_id:
            raise StoreError("Payment buyer and seller must differ")
        with self._store._data_access():
            payment_id = next(self._store._payment_ids)
            operation_timestamp = self._store._time_provider.now()
        row = PaymentRow(
            id=payment_id,
            currency_id=currency_id,
            amount=amount,
            buyer_account_id=buyer_account_id,
            seller_account_id=seller_account_id,
            operation_timestamp=operation_timestamp,
        )
        self._payment_inserts.append(row)
        return row

    # -------------------------------------------------------------------------
    # Transaction control
    # -------------------------------------------------------------------------

    def commit(self) -> None:
        self._ensure_open()
        try:
            with self._store._data_access():
                self._store._accounts.update(self._account_writes)
                self._store._payments.update({row.id: row for row in self._payment_inserts})
        finally:
            self._close()

    def rollback(self) -> None:
        if self._closed:
            return
        if self._account_writes or self._payment_inserts:
            logger.debug(
                "Rolling back %d account writes and %d payment inserts",
                len(self._account_writes),
                len(self._payment_inserts),
            )
        self._close()

    def _close(self) -> None:
        self._closed = True
        self._account_writes.clear()
        self._payment_inserts.clear()
        for lock in self._held_locks.values():
            lock.release()
        self._held_locks.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError("Transaction has already been committed or rolled back")

    def _lock_row(self, account_id: int) -> None:
        if account_id in self._held_locks:
            return
        lock = self._store._row_lock(account_id)
        if not lock.acquire(timeout=self._store.query_timeout):
            raise StoreTimeoutError(
                f"Timed out after {self._store.query_timeout}s waiting for account {account_id}"
            )
        self._held_locks[account_id] = lock

    def _check_balance(self, amount: Decimal) -> None:
        if amount < 0:
            raise StoreError(f"Account balance cannot be negative, got {amount}")


def as_transaction(uow: UnitOfWork, store: InMemoryStore) -> InMemoryTransaction:
    """Narrow a UnitOfWork to a transaction opened on ``store``."""
    if not isinstance(uow, InMemoryTransaction) or uow.store is not store:
        raise StoreError("Unit of work was not opened on this in-memory store")
    return uow

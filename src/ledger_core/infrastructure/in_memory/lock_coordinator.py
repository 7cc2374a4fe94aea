from __future__ import annotations

from typing import TYPE_CHECKING

from ledger_core.application.ports import LockCoordinator
from ledger_core.domain.exceptions import AccountNotFoundError
from ledger_core.infrastructure.in_memory.store import as_transaction

if TYPE_CHECKING:
    from ledger_core.application.ports import UnitOfWork
    from ledger_core.infrastructure.in_memory.store import InMemoryStore


class InMemoryLockCoordinator(LockCoordinator):
    """Skip-locked pair locking over InMemoryStore row locks.

    Rows locked by this attempt stay held by the transaction even when the
    other row was busy; the caller's rollback releases them.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def try_lock(self, uow: UnitOfWork, first_id: int, second_id: int) -> bool:
        tx = as_transaction(uow, self._store)
        ids = {first_id, second_id}
        found = {row.id for row in tx.select_accounts(ids)}
        if found != ids:
            missing = ", ".join(str(account_id) for account_id in sorted(ids - found))
            raise AccountNotFoundError(f"Account not found: {missing}")
        return tx.lock_accounts_skip_locked(ids) == ids

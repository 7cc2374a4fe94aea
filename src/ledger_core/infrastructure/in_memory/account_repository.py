from __future__ import annotations

from typing import TYPE_CHECKING

from ledger_core.application.ports import AccountRepository
from ledger_core.domain.entities import Account
from ledger_core.domain.exceptions import AccountNotFoundError, InvalidFieldError
from ledger_core.infrastructure.in_memory.store import as_transaction

if TYPE_CHECKING:
    from ledger_core.application.ports import UnitOfWork
    from ledger_core.infrastructure.in_memory.store import (
        AccountRow,
        InMemoryStore,
        InMemoryTransaction,
    )


class InMemoryAccountRepository(AccountRepository):
    """Account repository over an InMemoryStore.

    Implementation notes:
    - Entities are built fresh from stored rows, so mutating a returned
      Account never touches stored state
    - Unknown currencies are rejected before reaching the store, which
      would otherwise fail them as a foreign-key violation
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list(self, uow: UnitOfWork) -> list[Account]:
        tx = as_transaction(uow, self._store)
        return [self._to_entity(row) for row in tx.select_accounts()]

    def get(self, uow: UnitOfWork, account_id: int) -> Account:
        tx = as_transaction(uow, self._store)
        rows = tx.select_accounts([account_id])
        if not rows:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return self._to_entity(rows[0])

    def create(self, uow: UnitOfWork, account: Account) -> int:
        tx = as_transaction(uow, self._store)
        return self._insert(tx, account)

    def save(self, uow: UnitOfWork, account: Account) -> int:
        tx = as_transaction(uow, self._store)
        if not account.is_persisted:
            return self._insert(tx, account)
        if not tx.update_account(account.id, account.name, account.amount):
            raise AccountNotFoundError(f"Account not found: {account.id}")
        return account.id

    def _insert(self, tx: InMemoryTransaction, account: Account) -> int:
        account.validate_for_insert()
        if self._store.currency_name(account.currency_id) is None:
            raise InvalidFieldError("currency_id", f"Unknown currency: {account.currency_id}")
        return tx.insert_account(account.name, account.currency_id, account.amount)

    def _to_entity(self, row: AccountRow) -> Account:
        return Account(
            id=row.id,
            name=row.name,
            currency_id=row.currency_id,
            amount=row.amount,
            currency_name=self._store.currency_name(row.currency_id),
        )

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ledger_core.domain.amount import parse_amount
from ledger_core.domain.entities import Account

if TYPE_CHECKING:
    from decimal import Decimal

    from ledger_core.application.ports import AccountRepository, TransactionalStore


class AccountService:
    """Account operations that each run in their own transaction.

    Read paths always roll back; create commits on success and rolls back
    on any error.
    """

    def __init__(self, store: TransactionalStore, account_repository: AccountRepository) -> None:
        self._store = store
        self._account_repo = account_repository

    def list_accounts(self) -> list[Account]:
        with self._store.begin() as uow:
            return self._account_repo.list(uow)

    def get_account(self, account_id: int) -> Account:
        with self._store.begin() as uow:
            return self._account_repo.get(uow, account_id)

    def create_account(
        self, name: str, currency_id: int, amount: Decimal | int | float | str
    ) -> Account:
        """Create an account and return it with its assigned id."""
        account = Account.new(
            name=name,
            currency_id=currency_id,
            amount=parse_amount(amount),
        )
        with self._store.begin() as uow:
            account_id = self._account_repo.create(uow, account)
            uow.commit()
        return replace(account, id=account_id)

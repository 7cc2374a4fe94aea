from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from ledger_core.application.ports import AccountRepository
from ledger_core.domain.entities import Account
from ledger_core.domain.exceptions import AccountNotFoundError, InvalidFieldError
from ledger_core.infrastructure.sql.models import accounts_table, currencies_table
from ledger_core.infrastructure.sql.store import as_unit_of_work

if TYPE_CHECKING:
    from sqlalchemy.engine import RowMapping
    from sqlalchemy.sql import Select

    from ledger_core.application.ports import UnitOfWork
    from ledger_core.infrastructure.sql.store import SqlAlchemyUnitOfWork


def _select_accounts() -> Select[Any]:
    return select(
        accounts_table.c.id,
        accounts_table.c.name,
        accounts_table.c.currency_id,
        accounts_table.c.amount,
        currencies_table.c.name.label("currency_name"),
    ).join_from(
        accounts_table,
        currencies_table,
        accounts_table.c.currency_id == currencies_table.c.id,
    )


class SqlAlchemyAccountRepository(AccountRepository):
    """Account repository issuing SQL through a SqlAlchemyUnitOfWork."""

    def list(self, uow: UnitOfWork) -> list[Account]:
        tx = as_unit_of_work(uow)
        rows = tx.execute(_select_accounts().order_by(accounts_table.c.id)).mappings().all()
        return [_to_entity(row) for row in rows]

    def get(self, uow: UnitOfWork, account_id: int) -> Account:
        tx = as_unit_of_work(uow)
        stmt = _select_accounts().where(accounts_table.c.id == account_id)
        row = tx.execute(stmt).mappings().one_or_none()
        if row is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return _to_entity(row)

    def create(self, uow: UnitOfWork, account: Account) -> int:
        return self._insert(as_unit_of_work(uow), account)

    def save(self, uow: UnitOfWork, account: Account) -> int:
        tx = as_unit_of_work(uow)
        if not account.is_persisted:
            return self._insert(tx, account)
        stmt = (
            update(accounts_table)
            .where(accounts_table.c.id == account.id)
            .values(name=account.name, amount=account.amount)
        )
        if tx.execute(stmt).rowcount == 0:
            raise AccountNotFoundError(f"Account not found: {account.id}")
        return account.id

    def _insert(self, tx: SqlAlchemyUnitOfWork, account: Account) -> int:
        account.validate_for_insert()
        currency = tx.execute(
            select(currencies_table.c.id).where(currencies_table.c.id == account.currency_id)
        ).scalar_one_or_none()
        if currency is None:
            raise InvalidFieldError("currency_id", f"Unknown currency: {account.currency_id}")
        result = tx.execute(
            insert(accounts_table).values(
                name=account.name,
                currency_id=account.currency_id,
                amount=account.amount,
            )
        )
        return result.inserted_primary_key[0]


def _to_entity(row: RowMapping) -> Account:
    return Account(
        id=row["id"],
        name=row["name"],
        currency_id=row["currency_id"],
        amount=row["amount"],
        currency_name=row["currency_name"],
    )

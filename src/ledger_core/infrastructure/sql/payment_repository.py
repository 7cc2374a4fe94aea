from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select

from ledger_core.application.ports import PaymentRepository
from ledger_core.domain.entities import Payment
from ledger_core.domain.exceptions import PaymentNotUpdatableError
from ledger_core.infrastructure.sql.models import currencies_table, payments_table
from ledger_core.infrastructure.sql.store import as_unit_of_work

if TYPE_CHECKING:
    from sqlalchemy.engine import RowMapping
    from sqlalchemy.sql import Select

    from ledger_core.application.ports import UnitOfWork


def _select_payments() -> Select[Any]:
    return select(
        payments_table.c.id,
        payments_table.c.currency_id,
        currencies_table.c.name.label("currency_name"),
        payments_table.c.amount,
        payments_table.c.buyer_account_id,
        payments_table.c.seller_account_id,
        payments_table.c.operation_timestamp,
    ).join_from(
        payments_table,
        currencies_table,
        payments_table.c.currency_id == currencies_table.c.id,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    """Append-only payment repository; the database stamps operation_timestamp."""

    def list(self, uow: UnitOfWork) -> list[Payment]:
        tx = as_unit_of_work(uow)
        stmt = _select_payments().order_by(
            payments_table.c.operation_timestamp, payments_table.c.id
        )
        return [_to_entity(row) for row in tx.execute(stmt).mappings().all()]

    def create(self, uow: UnitOfWork, payment: Payment) -> Payment:
        if payment.is_persisted:
            raise PaymentNotUpdatableError(f"Payment {payment.id} is already stored")
        tx = as_unit_of_work(uow)
        result = tx.execute(
            insert(payments_table).values(
                currency_id=payment.currency_id,
                amount=payment.amount,
                buyer_account_id=payment.buyer_account_id,
                seller_account_id=payment.seller_account_id,
            )
        )
        payment_id = result.inserted_primary_key[0]
        # Read back to pick up the server-assigned timestamp and currency name.
        stored = tx.execute(_select_payments().where(payments_table.c.id == payment_id))
        return _to_entity(stored.mappings().one())


def _to_entity(row: RowMapping) -> Payment:
    return Payment(
        id=row["id"],
        currency_id=row["currency_id"],
        amount=row["amount"],
        buyer_account_id=row["buyer_account_id"],
        seller_account_id=row["seller_account_id"],
        operation_timestamp=row["operation_timestamp"],
        currency_name=row["currency_name"],
    )

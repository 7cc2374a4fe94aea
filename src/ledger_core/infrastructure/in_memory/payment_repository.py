from __future__ import annotations

from typing import TYPE_CHECKING

from ledger_core.application.ports import PaymentRepository
from ledger_core.domain.entities import Payment
from ledger_core.domain.exceptions import PaymentNotUpdatableError
from ledger_core.infrastructure.in_memory.store import as_transaction

if TYPE_CHECKING:
    from ledger_core.application.ports import UnitOfWork
    from ledger_core.infrastructure.in_memory.store import InMemoryStore, PaymentRow


class InMemoryPaymentRepository(PaymentRepository):
    """Append-only payment repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def list(self, uow: UnitOfWork) -> list[Payment]:
        tx = as_transaction(uow, self._store)
        return [self._to_entity(row) for row in tx.select_payments()]

    def create(self, uow: UnitOfWork, payment: Payment) -> Payment:
        if payment.is_persisted:
            raise PaymentNotUpdatableError(f"Payment {payment.id} is already stored")
        tx = as_transaction(uow, self._store)
        row = tx.insert_payment(
            currency_id=payment.currency_id,
            amount=payment.amount,
            buyer_account_id=payment.buyer_account_id,
            seller_account_id=payment.seller_account_id,
        )
        return self._to_entity(row)

    def _to_entity(self, row: PaymentRow) -> Payment:
        return Payment(
            id=row.id,
            currency_id=row.currency_id,
            amount=row.amount,
            buyer_account_id=row.buyer_account_id,
            seller_account_id=row.seller_account_id,
            operation_timestamp=row.operation_timestamp,
            currency_name=self._store.currency_name(row.currency_id),
        )

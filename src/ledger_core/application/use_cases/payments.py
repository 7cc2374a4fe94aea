from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal

    from ledger_core.application.ports import PaymentRepository, TransactionalStore
    from ledger_core.application.use_cases.transfer_funds import TransferEngine
    from ledger_core.domain.entities import Payment


class PaymentService:
    """Payment listing plus the transfer entry point for the request layer."""

    def __init__(
        self,
        store: TransactionalStore,
        payment_repository: PaymentRepository,
        transfer_engine: TransferEngine,
    ) -> None:
        self._store = store
        self._payment_repo = payment_repository
        self._transfer_engine = transfer_engine

    def list_payments(self) -> list[Payment]:
        with self._store.begin() as uow:
            return self._payment_repo.list(uow)

    def make_payment(
        self,
        buyer_account_id: int,
        seller_account_id: int,
        amount: Decimal | int | float | str,
    ) -> Payment:
        return self._transfer_engine.transfer(buyer_account_id, seller_account_id, amount)

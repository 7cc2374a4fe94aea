"""Payment entity: the immutable record of a completed transfer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ledger_core.domain.exceptions import NonPositiveAmountError, SelfTransferError

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

UNSAVED_ID = 0


@dataclass(frozen=True, slots=True)
class Payment:
    """Payment entity.

    A payment is created exactly once per successful transfer, inside the
    same transaction as the buyer debit and seller credit. It is never
    updated or deleted. ``id`` and ``operation_timestamp`` are assigned by
    the store on insert.

    Use the create() factory method to construct unsaved instances with
    validation.
    """

    id: int
    currency_id: int
    amount: Decimal
    buyer_account_id: int
    seller_account_id: int
    operation_timestamp: datetime | None = None
    currency_name: str | None = None

    @classmethod
    def create(
        cls,
        currency_id: int,
        amount: Decimal,
        buyer_account_id: int,
        seller_account_id: int,
    ) -> Payment:
        """Factory method to create an unsaved Payment with validation.

        Raises:
            NonPositiveAmountError: If amount <= 0.
            SelfTransferError: If buyer and seller are the same account.
        """
        if amount <= 0:
            raise NonPositiveAmountError(f"Payment amount must be positive, got {amount}")
        if buyer_account_id == seller_account_id:
            raise SelfTransferError(f"Account {buyer_account_id} cannot pay itself")

        return cls(
            id=UNSAVED_ID,
            currency_id=currency_id,
            amount=amount,
            buyer_account_id=buyer_account_id,
            seller_account_id=seller_account_id,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_ID

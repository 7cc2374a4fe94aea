from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger_core.application.ports.unit_of_work import UnitOfWork
    from ledger_core.domain.entities import Payment


class PaymentRepository(ABC):
    """Port for append-only payment persistence.

    Contract:
    - There is no update or delete path
    - Payments are listed by operation timestamp ascending, ties by id
    - The operation timestamp is assigned by the store, never by the caller
    """

    @abstractmethod
    def list(self, uow: UnitOfWork) -> list[Payment]:
        """Return all payments ordered by operation time."""

    @abstractmethod
    def create(self, uow: UnitOfWork, payment: Payment) -> Payment:
        """Insert an unsaved payment.

        Returns:
            A copy of the payment carrying the assigned id and
            operation_timestamp.

        Raises:
            PaymentNotUpdatableError: If payment.id is already set.
        """

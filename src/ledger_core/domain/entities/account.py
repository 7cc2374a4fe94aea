"""Account entity: a named balance held in a single currency."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ledger_core.domain.amount import add_exact, subtract_exact
from ledger_core.domain.exceptions import InsufficientFundsError, InvalidFieldError

if TYPE_CHECKING:
    from decimal import Decimal

UNSAVED_ID = 0


@dataclass(frozen=True, slots=True)
class Account:
    """Account entity.

    An id of zero means the account has not been persisted yet. Balances
    are arbitrary-precision decimals and must never go negative; the
    transfer engine enforces this, and the SQL schema repeats it as a
    check constraint.

    Account is immutable (frozen dataclass). ``debit`` and ``credit``
    return new instances that must be saved explicitly.
    """

    id: int
    name: str
    currency_id: int
    amount: Decimal
    currency_name: str | None = None

    @classmethod
    def new(cls, name: str, currency_id: int, amount: Decimal) -> Account:
        """Build an unsaved account."""
        return cls(id=UNSAVED_ID, name=name, currency_id=currency_id, amount=amount)

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_ID

    def validate_for_insert(self) -> None:
        """Check the fields an insert needs.

        Raises:
            InvalidFieldError: If the account already has an id, lacks a
                name, currency or amount, or has a non-finite or negative
                amount.
        """
        if self.is_persisted:
            raise InvalidFieldError("id", f"Account {self.id} is already persisted")
        if self.name is None:
            raise InvalidFieldError("name", "name is required")
        if not self.currency_id:
            raise InvalidFieldError("currency_id", "currency_id is required")
        if self.amount is None:
            raise InvalidFieldError("amount", "amount is required")
        if not self.amount.is_finite():
            raise InvalidFieldError("amount", f"amount must be a finite number, got {self.amount}")
        if self.amount < 0:
            raise InvalidFieldError("amount", f"Balance cannot be negative, got {self.amount}")

    def debit(self, amount: Decimal) -> Account:
        """Withdraw ``amount`` from the balance.

        Raises:
            InsufficientFundsError: If the balance is lower than ``amount``.
        """
        if self.amount < amount:
            raise InsufficientFundsError(
                f"Account {self.id} has balance {self.amount}, cannot debit {amount}"
            )
        return replace(self, amount=subtract_exact(self.amount, amount))

    def credit(self, amount: Decimal) -> Account:
        return replace(self, amount=add_exact(self.amount, amount))

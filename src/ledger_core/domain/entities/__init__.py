"""Domain entities - Objects with identity and lifecycle."""

from ledger_core.domain.entities.account import Account
from ledger_core.domain.entities.payment import Payment

__all__ = [
    "Account",
    "Payment",
]

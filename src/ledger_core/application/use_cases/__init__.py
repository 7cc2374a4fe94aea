"""Use cases - Transaction-owning entry points called by the request layer."""

from ledger_core.application.use_cases.accounts import AccountService
from ledger_core.application.use_cases.payments import PaymentService
from ledger_core.application.use_cases.transfer_funds import TransferEngine

__all__ = [
    "AccountService",
    "PaymentService",
    "TransferEngine",
]

"""Ports - Abstract interfaces for external dependencies.

Ports define the contracts that infrastructure adapters must implement.
This allows the application layer to remain decoupled from concrete implementations.
"""

from ledger_core.application.ports.account_repository import AccountRepository
from ledger_core.application.ports.lock_coordinator import LockCoordinator
from ledger_core.application.ports.payment_repository import PaymentRepository
from ledger_core.application.ports.time_provider import TimeProvider
from ledger_core.application.ports.unit_of_work import TransactionalStore, UnitOfWork

__all__ = [
    "AccountRepository",
    "LockCoordinator",
    "PaymentRepository",
    "TimeProvider",
    "TransactionalStore",
    "UnitOfWork",
]

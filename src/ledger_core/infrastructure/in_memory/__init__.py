"""In-memory adapters: a transactional store with row locks and its repositories."""

from ledger_core.infrastructure.in_memory.account_repository import InMemoryAccountRepository
from ledger_core.infrastructure.in_memory.lock_coordinator import InMemoryLockCoordinator
from ledger_core.infrastructure.in_memory.payment_repository import InMemoryPaymentRepository
from ledger_core.infrastructure.in_memory.store import InMemoryStore, InMemoryTransaction

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryLockCoordinator",
    "InMemoryPaymentRepository",
    "InMemoryStore",
    "InMemoryTransaction",
]

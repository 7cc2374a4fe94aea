"""SQLAlchemy adapters: relational store, repositories and skip-locked pair locking."""

from ledger_core.infrastructure.sql.account_repository import SqlAlchemyAccountRepository
from ledger_core.infrastructure.sql.lock_coordinator import SqlAlchemyLockCoordinator
from ledger_core.infrastructure.sql.models import Base
from ledger_core.infrastructure.sql.payment_repository import SqlAlchemyPaymentRepository
from ledger_core.infrastructure.sql.store import SqlAlchemyStore, SqlAlchemyUnitOfWork

__all__ = [
    "Base",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyLockCoordinator",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyStore",
    "SqlAlchemyUnitOfWork",
]

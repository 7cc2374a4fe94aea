"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- In-memory: A transactional store with row locks, for tests and embedding
- SQL: SQLAlchemy repositories and skip-locked pair locking for PostgreSQL
- Time Provider: Clock abstraction for server-assigned timestamps

Infrastructure adapters implement the ports defined in the application layer.
"""

from ledger_core.infrastructure.time_provider import ManualTimeProvider, SystemTimeProvider

__all__ = [
    "ManualTimeProvider",
    "SystemTimeProvider",
]

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class UnitOfWork(ABC):
    """Port for a single store transaction.

    Contract:
    - Every read and write issued through a UnitOfWork is bounded by the
      store's query timeout; overruns raise StoreTimeoutError
    - commit() publishes all writes atomically and releases row locks
    - rollback() discards all writes and releases row locks
    - rollback() after commit() or rollback() is a no-op
    - Leaving the context manager rolls back anything not committed

    A UnitOfWork is owned by one caller at a time and is not shared
    between threads.
    """

    @abstractmethod
    def commit(self) -> None:
        """Commit the transaction."""

    @abstractmethod
    def rollback(self) -> None:
        """Roll back the transaction, releasing any row locks it holds."""

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()


class TransactionalStore(ABC):
    """Port for opening transactions against the account store.

    Services receive a TransactionalStore at construction and never a raw
    connection, so tests can substitute the in-memory store.
    """

    @abstractmethod
    def begin(self) -> UnitOfWork:
        """Open a new transaction."""

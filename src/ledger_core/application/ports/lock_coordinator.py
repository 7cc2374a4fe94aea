from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger_core.application.ports.unit_of_work import UnitOfWork


class LockCoordinator(ABC):
    """Port for pairwise, non-blocking account row locking.

    Contract:
    - try_lock() MUST NOT wait on a row locked by another transaction
    - try_lock() returns True only when every requested row is now held
      by ``uow``
    - On False the caller MUST roll back ``uow`` immediately; a partially
      locked idle transaction would itself cause contention
    - Locks are released when ``uow`` commits or rolls back

    Two blocking locks taken in caller order deadlock when two transfers
    hit the same pair in opposite directions. Skipping locked rows and
    retrying with backoff turns that deadlock into bounded retries.
    """

    @abstractmethod
    def try_lock(self, uow: UnitOfWork, first_id: int, second_id: int) -> bool:
        """Attempt to lock both account rows inside ``uow``.

        Raises:
            AccountNotFoundError: If either account does not exist. Nothing
                is locked in that case.
        """

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from ledger_core.application.ports import LockCoordinator
from ledger_core.domain.exceptions import AccountNotFoundError
from ledger_core.infrastructure.sql.models import accounts_table
from ledger_core.infrastructure.sql.store import as_unit_of_work

if TYPE_CHECKING:
    from ledger_core.application.ports import UnitOfWork


class SqlAlchemyLockCoordinator(LockCoordinator):
    """Pair locking with ``SELECT ... FOR UPDATE SKIP LOCKED``.

    The existence probe runs first so a missing account is reported as
    such instead of looking like contention. The locking select then
    returns only the rows it managed to lock; fewer rows than requested
    means another transaction holds at least one of them.
    """

    def try_lock(self, uow: UnitOfWork, first_id: int, second_id: int) -> bool:
        tx = as_unit_of_work(uow)
        ids = sorted({first_id, second_id})
        id_filter = accounts_table.c.id.in_(ids)

        count = tx.execute(
            select(func.count()).select_from(accounts_table).where(id_filter)
        ).scalar_one()
        if count != len(ids):
            raise AccountNotFoundError(
                f"Account not found among: {', '.join(str(account_id) for account_id in ids)}"
            )

        locked = tx.execute(
            select(accounts_table.c.id).where(id_filter).with_for_update(skip_locked=True)
        ).scalars().all()
        return len(locked) == len(ids)

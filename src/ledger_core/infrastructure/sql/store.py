"""SQLAlchemy-backed transactional store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import exc as sa_exc
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from ledger_core.application.ports import TransactionalStore, UnitOfWork
from ledger_core.domain.exceptions import StoreError, StoreTimeoutError

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine, Result
    from sqlalchemy.orm import Session
    from sqlalchemy.sql import Executable

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 5.0

# PostgreSQL query_canceled, raised when statement_timeout fires.
_TIMEOUT_SQLSTATES = frozenset({"57014"})


def translate_error(error: sa_exc.SQLAlchemyError) -> StoreError:
    """Map a SQLAlchemy/driver error onto the store error taxonomy."""
    if isinstance(error, sa_exc.TimeoutError):
        return StoreTimeoutError(f"Timed out waiting for a database connection: {error}")
    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _TIMEOUT_SQLSTATES:
        return StoreTimeoutError(f"Statement exceeded its deadline: {orig}")
    return StoreError(str(orig if orig is not None else error))


class SqlAlchemyStore(TransactionalStore):
    """Opens one Session-backed transaction per begin()."""

    def __init__(self, engine: Engine, query_timeout: float = DEFAULT_QUERY_TIMEOUT) -> None:
        self._engine = engine
        self._query_timeout = query_timeout
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    def begin(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self._session_factory(), self._query_timeout)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """A database transaction bound to a single Session.

    On PostgreSQL every transaction starts with ``SET LOCAL
    statement_timeout`` so each statement, including row-lock waits, is
    bounded by the query timeout. Driver errors leave this class only as
    StoreError or StoreTimeoutError.
    """

    def __init__(self, session: Session, query_timeout: float) -> None:
        self._session = session
        self._closed = False
        if session.get_bind().dialect.name == "postgresql":
            timeout_ms = max(1, int(query_timeout * 1000))
            try:
                self.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
            except StoreError:
                self._close()
                raise

    def execute(self, statement: Executable, params: dict[str, Any] | None = None) -> Result[Any]:
        self._ensure_open()
        try:
            return self._session.execute(statement, params)
        except sa_exc.SQLAlchemyError as e:
            raise translate_error(e) from e

    def commit(self) -> None:
        self._ensure_open()
        try:
            self._session.commit()
        except sa_exc.SQLAlchemyError as e:
            raise translate_error(e) from e
        finally:
            self._close()

    def rollback(self) -> None:
        if self._closed:
            return
        try:
            self._session.rollback()
        except sa_exc.SQLAlchemyError as e:
            logger.error("Error on transaction rollback: %s", e)
            raise translate_error(e) from e
        finally:
            self._close()

    def _close(self) -> None:
        self._closed = True
        self._session.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError("Transaction has already been committed or rolled back")


def as_unit_of_work(uow: UnitOfWork) -> SqlAlchemyUnitOfWork:
    """Narrow a UnitOfWork to a SQLAlchemy transaction."""
    if not isinstance(uow, SqlAlchemyUnitOfWork):
        raise StoreError("Unit of work was not opened on a SQLAlchemy store")
    return uow

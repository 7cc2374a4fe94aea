"""Composition root: builds engines, schema and wired services.

The request layer calls build_sqlalchemy_services() once at startup and
keeps the returned LedgerServices for the lifetime of the process.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session

from ledger_core.application.backoff import exponential_backoff
from ledger_core.application.use_cases import AccountService, PaymentService, TransferEngine
from ledger_core.config import get_settings
from ledger_core.infrastructure.in_memory import (
    InMemoryAccountRepository,
    InMemoryLockCoordinator,
    InMemoryPaymentRepository,
    InMemoryStore,
)
from ledger_core.infrastructure.sql import (
    Base,
    SqlAlchemyAccountRepository,
    SqlAlchemyLockCoordinator,
    SqlAlchemyPaymentRepository,
    SqlAlchemyStore,
)
from ledger_core.infrastructure.sql.models import CurrencyRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy.engine import Engine

    from ledger_core.application.ports import (
        AccountRepository,
        LockCoordinator,
        PaymentRepository,
        TimeProvider,
        TransactionalStore,
    )
    from ledger_core.config import LedgerSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerServices:
    """Everything the request layer needs, wired to one store."""

    store: TransactionalStore
    accounts: AccountService
    payments: PaymentService
    transfer_engine: TransferEngine


def create_db_engine(settings: LedgerSettings | None = None) -> Engine:
    settings = settings or get_settings()
    url = make_url(settings.database_url)
    options: dict[str, object] = {"pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        options["pool_size"] = settings.pool_size
        options["pool_timeout"] = settings.query_timeout_seconds
    return create_engine(url, **options)


def create_schema(engine: Engine, currencies: Mapping[int, str] | None = None) -> None:
    """Create missing tables and seed currencies that are not there yet."""
    currencies = get_settings().currencies if currencies is None else currencies
    Base.metadata.create_all(engine)
    with Session(engine) as session, session.begin():
        existing = set(session.scalars(select(CurrencyRecord.id)))
        missing = {
            currency_id: name
            for currency_id, name in currencies.items()
            if currency_id not in existing
        }
        session.add_all(
            CurrencyRecord(id=currency_id, name=name) for currency_id, name in missing.items()
        )
    if missing:
        logger.info("Seeded currencies: %s", ", ".join(sorted(missing.values())))


def build_services(
    store: TransactionalStore,
    account_repository: AccountRepository,
    payment_repository: PaymentRepository,
    lock_coordinator: LockCoordinator,
    settings: LedgerSettings | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> LedgerServices:
    settings = settings or get_settings()
    transfer_engine = TransferEngine(
        store=store,
        account_repository=account_repository,
        payment_repository=payment_repository,
        lock_coordinator=lock_coordinator,
        backoff_policy=exponential_backoff(
            base_delay=settings.backoff_base_seconds,
            max_delay=settings.backoff_max_seconds,
        ),
        max_attempts=settings.lock_max_attempts,
        sleep=sleep,
    )
    return LedgerServices(
        store=store,
        accounts=AccountService(store, account_repository),
        payments=PaymentService(store, payment_repository, transfer_engine),
        transfer_engine=transfer_engine,
    )


def build_sqlalchemy_services(
    engine: Engine, settings: LedgerSettings | None = None
) -> LedgerServices:
    settings = settings or get_settings()
    store = SqlAlchemyStore(engine, query_timeout=settings.query_timeout_seconds)
    return build_services(
        store=store,
        account_repository=SqlAlchemyAccountRepository(),
        payment_repository=SqlAlchemyPaymentRepository(),
        lock_coordinator=SqlAlchemyLockCoordinator(),
        settings=settings,
    )


def build_in_memory_services(
    settings: LedgerSettings | None = None,
    time_provider: TimeProvider | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> LedgerServices:
    settings = settings or get_settings()
    store = InMemoryStore(
        currencies=settings.currencies,
        time_provider=time_provider,
        query_timeout=settings.query_timeout_seconds,
    )
    return build_services(
        store=store,
        account_repository=InMemoryAccountRepository(store),
        payment_repository=InMemoryPaymentRepository(store),
        lock_coordinator=InMemoryLockCoordinator(store),
        settings=settings,
        sleep=sleep,
    )

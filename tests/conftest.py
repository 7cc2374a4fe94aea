"""Shared pytest fixtures for the test suite."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from ledger_core.application.backoff import no_backoff
from ledger_core.application.use_cases import TransferEngine
from ledger_core.domain.entities import Account
from ledger_core.infrastructure.in_memory import (
    InMemoryAccountRepository,
    InMemoryLockCoordinator,
    InMemoryPaymentRepository,
    InMemoryStore,
)
from ledger_core.infrastructure.time_provider import ManualTimeProvider

USD = 1
RUB = 2


@pytest.fixture
def start_time() -> datetime:
    """A fixed timestamp for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def time_provider(start_time: datetime) -> ManualTimeProvider:
    """A clock that moves one second forward on every reading."""
    return ManualTimeProvider(start_time, step=timedelta(seconds=1))


@pytest.fixture
def store(time_provider: ManualTimeProvider) -> InMemoryStore:
    return InMemoryStore(time_provider=time_provider, query_timeout=1.0)


@pytest.fixture
def account_repository(store: InMemoryStore) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(store)


@pytest.fixture
def payment_repository(store: InMemoryStore) -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository(store)


@pytest.fixture
def lock_coordinator(store: InMemoryStore) -> InMemoryLockCoordinator:
    return InMemoryLockCoordinator(store)


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the transfer engine, recorded instead of slept."""
    return []


@pytest.fixture
def transfer_engine(
    store: InMemoryStore,
    account_repository: InMemoryAccountRepository,
    payment_repository: InMemoryPaymentRepository,
    lock_coordinator: InMemoryLockCoordinator,
    sleeps: list[float],
) -> TransferEngine:
    return TransferEngine(
        store=store,
        account_repository=account_repository,
        payment_repository=payment_repository,
        lock_coordinator=lock_coordinator,
        backoff_policy=no_backoff,
        max_attempts=3,
        sleep=sleeps.append,
    )


@pytest.fixture
def make_account(store: InMemoryStore, account_repository: InMemoryAccountRepository):
    """Create and commit an account, returning it with its assigned id."""

    def factory(currency_id: int = USD, amount: str = "0", name: str = "account") -> Account:
        with store.begin() as uow:
            account_id = account_repository.create(
                uow, Account.new(name=name, currency_id=currency_id, amount=Decimal(amount))
            )
            uow.commit()
        with store.begin() as uow:
            return account_repository.get(uow, account_id)

    return factory

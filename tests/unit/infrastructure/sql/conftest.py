"""Fixtures for the SQLAlchemy adapters, backed by in-process SQLite.

SQLite ignores FOR UPDATE, so these tests cover SQL shape and mapping;
row-lock contention is exercised against PostgreSQL in tests/integration.
Amounts are stored as exact text on SQLite (see DecimalText), so balance
assertions here are exact rather than float-rounded.
"""

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from ledger_core.bootstrap import create_schema
from ledger_core.infrastructure.sql import (
    SqlAlchemyAccountRepository,
    SqlAlchemyLockCoordinator,
    SqlAlchemyPaymentRepository,
    SqlAlchemyStore,
)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine, {1: "USD", 2: "RUB"})
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine: Engine) -> SqlAlchemyStore:
    return SqlAlchemyStore(engine, query_timeout=1.0)


@pytest.fixture
def sql_accounts() -> SqlAlchemyAccountRepository:
    return SqlAlchemyAccountRepository()


@pytest.fixture
def sql_payments() -> SqlAlchemyPaymentRepository:
    return SqlAlchemyPaymentRepository()


@pytest.fixture
def sql_lock_coordinator() -> SqlAlchemyLockCoordinator:
    return SqlAlchemyLockCoordinator()

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from ledger_core.application.ports import PaymentRepository
from ledger_core.domain.entities import Payment
from ledger_core.domain.exceptions import PaymentNotUpdatableError
from ledger_core.infrastructure.in_memory import InMemoryPaymentRepository, InMemoryStore

USD = 1
RUB = 2


class TestInMemoryPaymentRepository:
    def test_implements_payment_repository(
        self, payment_repository: InMemoryPaymentRepository
    ) -> None:
        assert isinstance(payment_repository, PaymentRepository)

    def test_create_assigns_id_and_timestamp(
        self,
        store: InMemoryStore,
        payment_repository: InMemoryPaymentRepository,
        start_time: datetime,
    ) -> None:
        with store.begin() as uow:
            stored = payment_repository.create(
                uow, Payment.create(RUB, Decimal("10.5"), buyer_account_id=1, seller_account_id=2)
            )
            uow.commit()

        assert stored.is_persisted
        assert stored.operation_timestamp == start_time
        assert stored.currency_name == "RUB"
        assert stored.amount == Decimal("10.5")

    def test_list_is_ordered_by_operation_time(
        self,
        store: InMemoryStore,
        payment_repository: InMemoryPaymentRepository,
        start_time: datetime,
    ) -> None:
        with store.begin() as uow:
            for amount in ("1", "2", "3"):
                payment_repository.create(uow, Payment.create(USD, Decimal(amount), 1, 2))
            uow.commit()

        with store.begin() as uow:
            payments = payment_repository.list(uow)

        assert [payment.amount for payment in payments] == [
            Decimal("1"),
            Decimal("2"),
            Decimal("3"),
        ]
        assert [payment.operation_timestamp for payment in payments] == [
            start_time + timedelta(seconds=offset) for offset in range(3)
        ]

    def test_persisted_payment_cannot_be_stored_again(
        self, store: InMemoryStore, payment_repository: InMemoryPaymentRepository
    ) -> None:
        with store.begin() as uow:
            stored = payment_repository.create(uow, Payment.create(USD, Decimal("1"), 1, 2))
            uow.commit()

        for _ in range(2):
            with store.begin() as uow, pytest.raises(PaymentNotUpdatableError):
                payment_repository.create(uow, stored)

        with store.begin() as uow:
            assert payment_repository.list(uow) == [stored]

    def test_uncommitted_payment_is_discarded(
        self, store: InMemoryStore, payment_repository: InMemoryPaymentRepository
    ) -> None:
        with store.begin() as uow:
            payment_repository.create(uow, Payment.create(USD, Decimal("1"), 1, 2))

        with store.begin() as uow:
            assert payment_repository.list(uow) == []

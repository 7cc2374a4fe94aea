"""Tests for the Payment entity.

Tests cover:
- Payment.create() factory method with validation
- Amount validation: amount must be > 0
- Self-payment rejection
- Payment immutability (frozen dataclass)
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from ledger_core.domain.entities import Payment
from ledger_core.domain.exceptions import NonPositiveAmountError, SelfTransferError


class TestPaymentCreate:
    def test_create_payment_with_valid_amount(self) -> None:
        payment = Payment.create(
            currency_id=1,
            amount=Decimal("123.321"),
            buyer_account_id=1,
            seller_account_id=2,
        )

        assert payment.id == 0
        assert payment.is_persisted is False
        assert payment.amount == Decimal("123.321")
        assert payment.buyer_account_id == 1
        assert payment.seller_account_id == 2
        assert payment.operation_timestamp is None

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("-0.00000001")])
    def test_create_rejects_non_positive_amount(self, amount: Decimal) -> None:
        with pytest.raises(NonPositiveAmountError):
            Payment.create(currency_id=1, amount=amount, buyer_account_id=1, seller_account_id=2)

    def test_create_rejects_payment_to_self(self) -> None:
        with pytest.raises(SelfTransferError):
            Payment.create(
                currency_id=1, amount=Decimal("1"), buyer_account_id=3, seller_account_id=3
            )


class TestPaymentImmutability:
    def test_payment_is_frozen(self) -> None:
        payment = Payment.create(
            currency_id=1, amount=Decimal("1"), buyer_account_id=1, seller_account_id=2
        )

        with pytest.raises(FrozenInstanceError):
            payment.amount = Decimal("2")  # type: ignore[misc]

    def test_payment_with_id_is_persisted(self) -> None:
        payment = Payment(
            id=5,
            currency_id=1,
            amount=Decimal("1"),
            buyer_account_id=1,
            seller_account_id=2,
        )

        assert payment.is_persisted is True

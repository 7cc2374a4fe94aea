"""Transfer engine: atomic, deadlock-free transfers between two accounts."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ledger_core.application.backoff import exponential_backoff
from ledger_core.domain.amount import parse_amount
from ledger_core.domain.entities import Payment
from ledger_core.domain.exceptions import (
    CurrencyMismatchError,
    InsufficientFundsError,
    LockFailedError,
    NonPositiveAmountError,
    SelfTransferError,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from decimal import Decimal

    from ledger_core.application.backoff import BackoffPolicy
    from ledger_core.application.ports import (
        AccountRepository,
        LockCoordinator,
        PaymentRepository,
        TransactionalStore,
        UnitOfWork,
    )

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOCK_ATTEMPTS = 10


class TransferEngine:
    """Moves an amount from a buyer account to a seller account.

    Workflow:
        Validating-preconditions -> Locking (retry loop) -> Locked ->
        Validating-balances -> Mutating -> Persisting-payment -> Committed

    Any failing step aborts: the open transaction is rolled back and the
    error propagates. Only lock contention is retried, and only inside the
    bounded loop in _lock_pair(). Business-rule and store failures are
    never retried here.

    Coordination happens through store row locks alone; the engine holds
    no in-process lock, so transfers on disjoint pairs run in parallel.
    """

    def __init__(
        self,
        store: TransactionalStore,
        account_repository: AccountRepository,
        payment_repository: PaymentRepository,
        lock_coordinator: LockCoordinator,
        backoff_policy: BackoffPolicy | None = None,
        max_attempts: int = DEFAULT_MAX_LOCK_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._store = store
        self._account_repo = account_repository
        self._payment_repo = payment_repository
        self._lock_coordinator = lock_coordinator
        self._backoff = backoff_policy or exponential_backoff()
        self._max_attempts = max_attempts
        self._sleep = sleep

    def transfer(
        self,
        buyer_account_id: int,
        seller_account_id: int,
        amount: Decimal | int | float | str,
    ) -> Payment:
        """Transfer ``amount`` from the buyer account to the seller account.

        Args:
            buyer_account_id: Account to debit.
            seller_account_id: Account to credit.
            amount: Positive quantity. Non-Decimal values are converted
                through their string form so no precision is lost.

        Returns:
            The persisted Payment, with id and operation timestamp set.

        Raises:
            SelfTransferError: Buyer and seller are the same account.
            NonPositiveAmountError: Amount is zero or negative.
            InvalidFieldError: Amount is not a finite decimal.
            AccountNotFoundError: Either account does not exist.
            LockFailedError: The pair stayed contended for every attempt.
            CurrencyMismatchError: The accounts hold different currencies.
            InsufficientFundsError: The buyer balance is below the amount.
            StoreTimeoutError: A store call exceeded its deadline.
            StoreError: Any other store failure.
        """
        amount = self._check_preconditions(buyer_account_id, seller_account_id, amount)

        uow = self._lock_pair(buyer_account_id, seller_account_id)
        with uow:
            payment = self._transfer_locked(uow, buyer_account_id, seller_account_id, amount)
            uow.commit()

        logger.info(
            "Payment %s committed: %s from account %s to account %s",
            payment.id,
            payment.amount,
            payment.buyer_account_id,
            payment.seller_account_id,
        )
        return payment

    def _check_preconditions(
        self,
        buyer_account_id: int,
        seller_account_id: int,
        amount: Decimal | int | float | str,
    ) -> Decimal:
        """Reject self-transfers whatever the amount, then parse and check it."""
        if buyer_account_id == seller_account_id:
            raise SelfTransferError(f"Account {buyer_account_id} cannot pay itself")
        amount = parse_amount(amount)
        if amount <= 0:
            raise NonPositiveAmountError(f"Transfer amount must be positive, got {amount}")
        return amount

    def _lock_pair(self, buyer_account_id: int, seller_account_id: int) -> UnitOfWork:
        """Open a transaction holding row locks on both accounts.

        Each attempt runs in a fresh transaction. A transaction that failed
        to lock both rows is rolled back before sleeping so it never sits
        on a partial lock.
        """
        for attempt in range(1, self._max_attempts + 1):
            uow = self._store.begin()
            try:
                acquired = self._lock_coordinator.try_lock(
                    uow, buyer_account_id, seller_account_id
                )
            except Exception:
                uow.rollback()
                raise

            if acquired:
                return uow

            uow.rollback()
            if attempt == self._max_attempts:
                break

            delay = self._backoff(attempt)
            logger.debug(
                "Accounts %s and %s are locked; attempt %d/%d, retrying in %.4fs",
                buyer_account_id,
                seller_account_id,
                attempt,
                self._max_attempts,
                delay,
            )
            self._sleep(delay)

        logger.warning(
            "Failed to lock accounts %s and %s after %d attempts",
            buyer_account_id,
            seller_account_id,
            self._max_attempts,
        )
        raise LockFailedError(
            f"Could not lock accounts {buyer_account_id} and {seller_account_id} "
            f"after {self._max_attempts} attempts"
        )

    def _transfer_locked(
        self,
        uow: UnitOfWork,
        buyer_account_id: int,
        seller_account_id: int,
        amount: Decimal,
    ) -> Payment:
        """Validate, mutate and record the transfer inside the locked transaction."""
        buyer = self._account_repo.get(uow, buyer_account_id)
        seller = self._account_repo.get(uow, seller_account_id)

        # Currency first: a mismatched pair is rejected whatever the balances.
        if buyer.currency_id != seller.currency_id:
            raise CurrencyMismatchError(
                f"Account {buyer.id} holds currency {buyer.currency_id}, "
                f"account {seller.id} holds currency {seller.currency_id}"
            )
        if buyer.amount < amount:
            raise InsufficientFundsError(
                f"Account {buyer.id} has balance {buyer.amount}, cannot transfer {amount}"
            )

        self._account_repo.save(uow, buyer.debit(amount))
        self._account_repo.save(uow, seller.credit(amount))

        payment = Payment.create(
            currency_id=buyer.currency_id,
            amount=amount,
            buyer_account_id=buyer.id,
            seller_account_id=seller.id,
        )
        return self._payment_repo.create(uow, payment)


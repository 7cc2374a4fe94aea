"""Domain exceptions for ledger-core.

Exception hierarchy:
    LedgerError (base, carries an ErrorKind)
    ├── Validation Errors (caller's fault, never retried)
    │   ├── SelfTransferError
    │   ├── NonPositiveAmountError
    │   ├── CurrencyMismatchError
    │   └── InvalidFieldError
    ├── Not Found Errors
    │   └── AccountNotFoundError
    ├── Business Rule Errors
    │   ├── InsufficientFundsError
    │   └── PaymentNotUpdatableError
    ├── Contention Errors
    │   └── LockFailedError (transient)
    └── Store Errors
        ├── StoreError (raw store failure, translated by adapters)
        └── StoreTimeoutError (transient)

Callers switch on ``error.kind`` rather than matching message strings.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds surfaced by the ledger core."""

    SELF_TRANSFER = "self_transfer"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    CURRENCY_MISMATCH = "currency_mismatch"
    INVALID_FIELD = "invalid_field"
    NOT_FOUND = "not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    LOCK_FAILED = "lock_failed"
    TIMEOUT = "timeout"
    STORE_FAILURE = "store_failure"
    NOT_UPDATABLE = "not_updatable"


_TRANSIENT_KINDS = frozenset({ErrorKind.LOCK_FAILED, ErrorKind.TIMEOUT})


class LedgerError(Exception):
    """Base exception for all ledger-core errors.

    Subclasses pin ``kind``; ``transient`` tells the caller whether retrying
    the whole operation later could succeed.
    """

    kind: ErrorKind = ErrorKind.STORE_FAILURE

    @property
    def transient(self) -> bool:
        return self.kind in _TRANSIENT_KINDS


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(LedgerError):
    """Raised when a request is malformed or violates an input rule."""


class SelfTransferError(ValidationError):
    """Raised when buyer and seller are the same account."""

    kind = ErrorKind.SELF_TRANSFER


class NonPositiveAmountError(ValidationError):
    """Raised when a transfer amount is zero or negative."""

    kind = ErrorKind.NON_POSITIVE_AMOUNT


class CurrencyMismatchError(ValidationError):
    """Raised when buyer and seller accounts hold different currencies."""

    kind = ErrorKind.CURRENCY_MISMATCH


class InvalidFieldError(ValidationError):
    """Raised when a required field is missing or holds an unusable value."""

    kind = ErrorKind.INVALID_FIELD

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(LedgerError):
    """Raised when a referenced record does not exist."""

    kind = ErrorKind.NOT_FOUND


class AccountNotFoundError(NotFoundError):
    """Raised when one or more account ids match no stored account."""


# =============================================================================
# Business Rule Errors
# =============================================================================


class InsufficientFundsError(LedgerError):
    """Raised when the buyer balance is lower than the transfer amount."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class PaymentNotUpdatableError(LedgerError):
    """Raised when persisting a payment that already has an identity.

    Payments are append-only: once stored they are never rewritten.
    """

    kind = ErrorKind.NOT_UPDATABLE


# =============================================================================
# Contention Errors
# =============================================================================


class LockFailedError(LedgerError):
    """Raised when the pairwise account lock was not obtained within the retry budget.

    This is TRANSIENT: the whole transfer may be retried later as a fresh
    operation.
    """

    kind = ErrorKind.LOCK_FAILED


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(LedgerError):
    """Raised when the underlying store fails for a non-business reason."""

    kind = ErrorKind.STORE_FAILURE


class StoreTimeoutError(StoreError):
    """Raised when a store call exceeds its deadline.

    Distinct from StoreError so callers can tell infrastructure slowness
    apart from a call that could never succeed. Timeouts never count
    towards the lock-retry budget.
    """

    kind = ErrorKind.TIMEOUT

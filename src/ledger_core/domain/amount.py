"""Parsing and exact arithmetic for monetary amounts."""

from __future__ import annotations

from decimal import Decimal, Inexact, InvalidOperation, localcontext

from ledger_core.domain.exceptions import InvalidFieldError


def parse_amount(value: Decimal | int | float | str | None, field: str = "amount") -> Decimal:
    """Return ``value`` as a finite Decimal.

    Non-Decimal input goes through its string form, so ``"250.00000001"``
    keeps every digit and ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        InvalidFieldError: If the value is missing, unparsable or not finite.
    """
    if value is None:
        raise InvalidFieldError(field, f"{field} is required")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation as e:
            raise InvalidFieldError(field, f"Invalid {field}: {value!r}") from e
    if not amount.is_finite():
        raise InvalidFieldError(field, f"{field} must be a finite number, got {amount}")
    return amount


def _exact_precision(*operands: Decimal) -> int:
    """Digits needed to add or subtract ``operands`` without rounding."""
    # One extra digit for a carry out of the most significant place.
    top = max(operand.adjusted() for operand in operands) + 2
    bottom = min(operand.as_tuple().exponent for operand in operands)
    return max(top - bottom, 1)


def add_exact(left: Decimal, right: Decimal) -> Decimal:
    """Return ``left + right`` with every digit kept.

    The default decimal context keeps 28 significant digits; balances are
    unbounded, so the context is widened to fit both operands. ``Inexact``
    is trapped so a rounded result can never be returned.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_precision(left, right))
        ctx.traps[Inexact] = True
        return left + right


def subtract_exact(left: Decimal, right: Decimal) -> Decimal:
    """Return ``left - right`` with every digit kept."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _exact_precision(left, right))
        ctx.traps[Inexact] = True
        return left - right

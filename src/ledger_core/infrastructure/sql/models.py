"""Relational schema for currencies, accounts and payments."""

from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    TypeDecorator,
    func,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_Identity = BigInteger().with_variant(Integer(), "sqlite")


class DecimalText(TypeDecorator):
    """Decimal stored as plain text, for backends without an exact numeric type.

    Values are written in positional notation and zero is always "0", so a
    text comparison against the literal 0 agrees with the numeric sign and
    the CHECK constraints below hold on SQLite as well.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):  # noqa: ARG002
        if value is None:
            return None
        value = value if isinstance(value, Decimal) else Decimal(str(value))
        return "0" if value.is_zero() else format(value, "f")

    def process_result_value(self, value, dialect):  # noqa: ARG002
        return None if value is None else Decimal(value)


# SQLite NUMERIC goes through floating point; keep money exact as text there.
_Money = Numeric().with_variant(DecimalText(), "sqlite")


class CurrencyRecord(Base):
    __tablename__ = "currencies"
    id = Column(Integer, primary_key=True)
    name = Column(String(16), nullable=False, unique=True)


class AccountRecord(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="accounts_amount_non_negative"),
    )
    id = Column(_Identity, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, server_default="")
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    amount = Column(_Money, nullable=False)


class PaymentRecord(Base):
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="payments_amount_positive"),
        CheckConstraint(
            "buyer_account_id <> seller_account_id", name="payments_distinct_accounts"
        ),
        Index("payments_operation_timestamp_idx", "operation_timestamp"),
    )
    id = Column(_Identity, primary_key=True, autoincrement=True)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    amount = Column(_Money, nullable=False)
    buyer_account_id = Column(_Identity, ForeignKey("accounts.id"), nullable=False)
    seller_account_id = Column(_Identity, ForeignKey("accounts.id"), nullable=False)
    operation_timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


currencies_table = CurrencyRecord.__table__
accounts_table = AccountRecord.__table__
payments_table = PaymentRecord.__table__

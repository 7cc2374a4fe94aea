from decimal import Decimal

import pytest

from ledger_core.application.ports import AccountRepository
from ledger_core.domain.entities import Account
from ledger_core.domain.exceptions import AccountNotFoundError, InvalidFieldError, StoreError
from ledger_core.infrastructure.sql import SqlAlchemyAccountRepository, SqlAlchemyStore

USD = 1
RUB = 2


def create(store: SqlAlchemyStore, repo: SqlAlchemyAccountRepository, account: Account) -> int:
    with store.begin() as uow:
        account_id = repo.create(uow, account)
        uow.commit()
    return account_id


class TestSqlAlchemyAccountRepository:
    def test_implements_account_repository(
        self, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        assert isinstance(sql_accounts, AccountRepository)

    def test_create_then_get(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        account_id = create(sql_store, sql_accounts, Account.new("bob", RUB, Decimal("123.321")))

        with sql_store.begin() as uow:
            account = sql_accounts.get(uow, account_id)

        assert account.id == account_id
        assert account.name == "bob"
        assert account.currency_id == RUB
        assert account.currency_name == "RUB"
        assert account.amount == Decimal("123.321")

    def test_get_missing(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        with sql_store.begin() as uow, pytest.raises(AccountNotFoundError):
            sql_accounts.get(uow, 404)

    def test_list_in_id_order(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        ids = [
            create(sql_store, sql_accounts, Account.new(name, USD, Decimal("1")))
            for name in ("first", "second")
        ]

        with sql_store.begin() as uow:
            accounts = sql_accounts.list(uow)

        assert [account.id for account in accounts] == ids
        assert {account.currency_name for account in accounts} == {"USD"}

    def test_save_updates_balance_and_name(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        account_id = create(sql_store, sql_accounts, Account.new("old", USD, Decimal("500.5")))

        with sql_store.begin() as uow:
            account = sql_accounts.get(uow, account_id)
            sql_accounts.save(uow, account.debit(Decimal("0.5")))
            uow.commit()

        with sql_store.begin() as uow:
            assert sql_accounts.get(uow, account_id).amount == Decimal("500")

    def test_save_of_missing_account(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        ghost = Account(id=99, name="ghost", currency_id=USD, amount=Decimal("1"))

        with sql_store.begin() as uow, pytest.raises(AccountNotFoundError):
            sql_accounts.save(uow, ghost)

    def test_save_negative_balance_violates_check(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        account_id = create(sql_store, sql_accounts, Account.new("a", USD, Decimal("1")))
        overdrawn = Account(id=account_id, name="a", currency_id=USD, amount=Decimal("-1"))

        with sql_store.begin() as uow, pytest.raises(StoreError):
            sql_accounts.save(uow, overdrawn)

    def test_create_rejects_unknown_currency(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        with sql_store.begin() as uow, pytest.raises(InvalidFieldError) as exc_info:
            sql_accounts.create(uow, Account.new("a", 42, Decimal("1")))

        assert exc_info.value.field == "currency_id"

    def test_create_rejects_negative_amount(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        with sql_store.begin() as uow, pytest.raises(InvalidFieldError) as exc_info:
            sql_accounts.create(uow, Account.new("a", USD, Decimal("-5")))

        assert exc_info.value.field == "amount"

    @pytest.mark.parametrize("amount", [Decimal("NaN"), Decimal("Infinity")])
    def test_create_rejects_non_finite_amount(
        self,
        sql_store: SqlAlchemyStore,
        sql_accounts: SqlAlchemyAccountRepository,
        amount: Decimal,
    ) -> None:
        with sql_store.begin() as uow, pytest.raises(InvalidFieldError) as exc_info:
            sql_accounts.create(uow, Account.new("a", USD, amount))

        assert exc_info.value.field == "amount"

    def test_amounts_round_trip_without_rounding(
        self, sql_store: SqlAlchemyStore, sql_accounts: SqlAlchemyAccountRepository
    ) -> None:
        amount = Decimal("123456789012345678901234567890.123456789012345678901")
        account_id = create(sql_store, sql_accounts, Account.new("big", USD, amount))

        with sql_store.begin() as uow:
            assert sql_accounts.get(uow, account_id).amount == amount

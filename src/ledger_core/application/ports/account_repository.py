from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledger_core.application.ports.unit_of_work import UnitOfWork
    from ledger_core.domain.entities import Account


class AccountRepository(ABC):
    """Port for account persistence.

    Contract:
    - Every method runs inside the caller-owned UnitOfWork; the repository
      never commits or rolls back
    - Returned entities carry the joined currency name
    - save() is the only path by which a balance is rewritten
    - Accounts are never deleted
    """

    @abstractmethod
    def list(self, uow: UnitOfWork) -> list[Account]:
        """Return all accounts ordered by id ascending."""

    @abstractmethod
    def get(self, uow: UnitOfWork, account_id: int) -> Account:
        """Retrieve an account by ID.

        Raises:
            AccountNotFoundError: If no account has this id.
        """

    @abstractmethod
    def create(self, uow: UnitOfWork, account: Account) -> int:
        """Insert a new account and return its store-assigned id.

        Raises:
            InvalidFieldError: If the account already has an id, lacks a
                currency or amount, has a negative amount, or references an
                unknown currency.
        """

    @abstractmethod
    def save(self, uow: UnitOfWork, account: Account) -> int:
        """Persist an account and return its id.

        Unsaved accounts (id == 0) are inserted as by create(). Otherwise
        the row's name and amount are overwritten.

        Raises:
            AccountNotFoundError: If the id matches no stored account.
        """

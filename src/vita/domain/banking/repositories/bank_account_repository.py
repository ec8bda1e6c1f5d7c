"""Repository interface for bank accounts."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from uuid import UUID

from vita.domain.banking.entities import BankAccount


class BankAccountRepository(ABC):
    """Repository for persisting bank accounts discovered under connections."""

    @abstractmethod
    async def upsert(self, account: BankAccount) -> BankAccount:
        """
        Insert an account or update the one with the same key.

        The key is (connection_id, external_account_id). On conflict the
        name, balance, available balance and updated timestamp are
        overwritten; everything else is kept.

        Parameters
        ----------
        account
            The account as observed now

        Returns
        -------
        The stored account
        """

    @abstractmethod
    async def upsert_many(self, accounts: list[BankAccount]) -> list[BankAccount]:
        """Upsert several accounts, in order."""

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Optional[BankAccount]:
        """Find an account by internal id."""

    @abstractmethod
    async def find_by_connection(self, connection_id: UUID) -> list[BankAccount]:
        """Find every account (active or not) under a connection."""

    @abstractmethod
    async def find_active_by_user(self, user_id: str) -> list[BankAccount]:
        """
        Find active accounts under any of the user's connections.

        Ordered by bank name, then account name.
        """

    @abstractmethod
    async def deactivate_by_connection(self, connection_id: UUID) -> int:
        """
        Mark every account under a connection inactive.

        Returns
        -------
        Number of accounts that were changed
        """

    @abstractmethod
    async def sum_active_balance(self, user_id: str, currency: str) -> Decimal:
        """
        Sum balances of the user's active accounts in one currency.

        Accounts in other currencies are excluded, never converted.

        Returns
        -------
        The sum, ``Decimal("0")`` when there is nothing to add up
        """

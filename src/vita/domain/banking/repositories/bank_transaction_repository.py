"""Repository interface for bank transactions."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from vita.domain.banking.entities import BankTransaction


class BankTransactionRepository(ABC):
    """Repository for persisting bank transactions."""

    @abstractmethod
    async def add_new(self, transactions: list[BankTransaction]) -> list[str]:
        """
        Insert transactions whose external id has not been seen before.

        Deduplication by external transaction id is authoritative: a row
        that already exists is left untouched (no field comparison, no
        update). Duplicates within the batch collapse to the first one.

        Parameters
        ----------
        transactions
            Candidate transactions from one sync pass

        Returns
        -------
        External ids of the rows that were actually inserted
        """

    @abstractmethod
    async def get_latest_bank_date(self, bank_account_id: UUID) -> Optional[date]:
        """
        Get the most recent booking date of bank-sourced transactions.

        Parameters
        ----------
        bank_account_id
            Internal id of the account

        Returns
        -------
        The latest date, or None if no bank transaction is stored
        """

    @abstractmethod
    async def find_by_user(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[BankTransaction]:
        """
        Find a user's bank-sourced transactions in an inclusive date range.

        Ordered newest first. Transactions whose account reference has
        been nulled are still included.
        """

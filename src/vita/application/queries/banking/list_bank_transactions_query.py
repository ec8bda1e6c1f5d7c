"""List a user's bank transactions."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from vita.domain.banking.entities import BankTransaction
from vita.domain.banking.repositories import BankTransactionRepository
from vita.domain.shared.exceptions import ValidationError

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory


class ListBankTransactionsQuery:
    """Query to list bank transactions in an optional date range."""

    def __init__(self, transaction_repository: BankTransactionRepository):
        self._transaction_repo = transaction_repository

    @classmethod
    def from_factory(cls, factory: RepositoryFactory) -> ListBankTransactionsQuery:
        return cls(transaction_repository=factory.bank_transaction_repository())

    async def execute(
        self,
        user_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[BankTransaction]:
        """
        Parameters
        ----------
        user_id
            Owner of the transactions
        from_date
            Inclusive lower bound on the booking date
        to_date
            Inclusive upper bound on the booking date

        Returns
        -------
        Transactions, newest first
        """
        if from_date and to_date and from_date > to_date:
            msg = f"from_date {from_date} is after to_date {to_date}"
            raise ValidationError(msg)
        return await self._transaction_repo.find_by_user(
            user_id,
            start_date=from_date,
            end_date=to_date,
        )

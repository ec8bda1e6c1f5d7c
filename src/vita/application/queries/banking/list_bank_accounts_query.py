"""List a user's active bank accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vita.domain.banking.entities import BankAccount
from vita.domain.banking.repositories import BankAccountRepository

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory


class ListBankAccountsQuery:
    """Query to list active accounts across all of a user's connections."""

    def __init__(self, account_repository: BankAccountRepository):
        self._account_repo = account_repository

    @classmethod
    def from_factory(cls, factory: RepositoryFactory) -> ListBankAccountsQuery:
        return cls(account_repository=factory.bank_account_repository())

    async def execute(self, user_id: str) -> list[BankAccount]:
        return await self._account_repo.find_active_by_user(user_id)

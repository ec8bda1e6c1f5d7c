"""List a user's bank connections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vita.domain.banking.entities import BankConnection
from vita.domain.banking.repositories import BankConnectionRepository

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory


class ListConnectionsQuery:
    """Query to list all connections of a user, newest first."""

    def __init__(self, connection_repository: BankConnectionRepository):
        self._connection_repo = connection_repository

    @classmethod
    def from_factory(cls, factory: RepositoryFactory) -> ListConnectionsQuery:
        return cls(connection_repository=factory.bank_connection_repository())

    async def execute(self, user_id: str) -> list[BankConnection]:
        return await self._connection_repo.find_by_user(user_id)

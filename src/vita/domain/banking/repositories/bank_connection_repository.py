"""Repository interface for bank connections."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from vita.domain.banking.entities import BankConnection


class BankConnectionRepository(ABC):
    """Repository for persisting users' links to financial institutions."""

    @abstractmethod
    async def upsert(self, connection: BankConnection) -> BankConnection:
        """
        Insert a connection or update the one with the same external id.

        On conflict only the lifecycle fields (status, status message,
        last sync, consent expiry) are overwritten. The owning user of an
        existing row is never changed.

        Parameters
        ----------
        connection
            The connection as observed now

        Returns
        -------
        The stored connection (with the id of the existing row on conflict)
        """

    @abstractmethod
    async def save(self, connection: BankConnection) -> None:
        """Persist changes to an already stored connection."""

    @abstractmethod
    async def find_by_id(self, connection_id: UUID) -> Optional[BankConnection]:
        """Find a connection by internal id."""

    @abstractmethod
    async def find_by_id_for_user(
        self,
        connection_id: UUID,
        user_id: str,
    ) -> Optional[BankConnection]:
        """
        Find a connection by internal id, restricted to its owner.

        Returns
        -------
        None when the connection does not exist or belongs to someone else
        """

    @abstractmethod
    async def find_by_external_id(
        self,
        external_connection_id: str,
    ) -> Optional[BankConnection]:
        """Find a connection by the aggregator-assigned id."""

    @abstractmethod
    async def find_by_user(self, user_id: str) -> list[BankConnection]:
        """Find all connections of a user, newest first."""

    @abstractmethod
    async def find_active_by_user(self, user_id: str) -> list[BankConnection]:
        """Find the user's connections with status ``active``."""

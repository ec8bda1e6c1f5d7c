"""Disconnect a bank connection (soft delete)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from vita.domain.banking.exceptions import UpstreamError
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.repositories import (
    BankAccountRepository,
    BankConnectionRepository,
)

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory

logger = logging.getLogger(__name__)


class DisconnectCommand:
    """
    Stop tracking a bank for a user.

    The connection is removed at the aggregator on a best-effort basis;
    locally it becomes inactive and so do its accounts. Transactions are
    left untouched.
    """

    def __init__(
        self,
        aggregator: AggregatorPort,
        connection_repo: BankConnectionRepository,
        account_repo: BankAccountRepository,
    ):
        self._aggregator = aggregator
        self._connection_repo = connection_repo
        self._account_repo = account_repo

    @classmethod
    def from_factory(
        cls,
        factory: RepositoryFactory,
        aggregator: AggregatorPort,
    ) -> DisconnectCommand:
        return cls(
            aggregator=aggregator,
            connection_repo=factory.bank_connection_repository(),
            account_repo=factory.bank_account_repository(),
        )

    async def execute(self, user_id: str, connection_id: UUID) -> bool:
        """
        Returns
        -------
        False when the connection does not exist or is not the user's
        """
        connection = await self._connection_repo.find_by_id_for_user(
            connection_id,
            user_id,
        )
        if connection is None:
            logger.info(
                "Disconnect: connection %s not found for user %s",
                connection_id,
                user_id,
            )
            return False

        try:
            removed = await self._aggregator.remove_connection(
                connection.external_connection_id,
            )
        except UpstreamError as e:
            logger.warning("Aggregator removal raised: %s", e)
            removed = False
        if not removed:
            logger.warning(
                "Connection %s could not be removed at the aggregator; "
                "cleaning up locally anyway",
                connection.external_connection_id,
            )

        connection.deactivate()
        await self._connection_repo.save(connection)
        deactivated = await self._account_repo.deactivate_by_connection(connection.id)

        logger.info(
            "Disconnected connection %s for user %s (%d account(s) deactivated)",
            connection.external_connection_id,
            user_id,
            deactivated,
        )
        return True

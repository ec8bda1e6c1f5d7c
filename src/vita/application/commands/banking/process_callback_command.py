"""Process the aggregator's callback for a connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from vita.application.commands.banking.account_sync_command import (
    AccountSyncCommand,
)
from vita.domain.banking.entities import BankConnection
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.repositories import BankConnectionRepository
from vita.domain.shared.time import utc_now

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory

logger = logging.getLogger(__name__)


class ProcessCallbackCommand:
    """
    Record the aggregator's current view of a connection, then sync accounts.

    Safe to repeat for the same external id (duplicate webhook delivery):
    the stored connection is updated in place. Account sync completes
    before this returns, so callers never see a connection without it.
    """

    def __init__(
        self,
        aggregator: AggregatorPort,
        connection_repo: BankConnectionRepository,
        account_sync: AccountSyncCommand,
    ):
        self._aggregator = aggregator
        self._connection_repo = connection_repo
        self._account_sync = account_sync

    @classmethod
    def from_factory(
        cls,
        factory: RepositoryFactory,
        aggregator: AggregatorPort,
    ) -> ProcessCallbackCommand:
        return cls(
            aggregator=aggregator,
            connection_repo=factory.bank_connection_repository(),
            account_sync=AccountSyncCommand.from_factory(factory, aggregator),
        )

    async def execute(
        self,
        external_connection_id: str,
        user_id: str,
    ) -> Optional[BankConnection]:
        """
        Parameters
        ----------
        external_connection_id
            Aggregator id of the connection named in the callback
        user_id
            User the callback was issued for; only used when the
            connection is new

        Returns
        -------
        The stored connection after account sync, or None if the aggregator
        does not know the connection (no local record is created)
        """
        remote = await self._aggregator.get_connection(external_connection_id)
        if remote is None:
            logger.warning(
                "Callback for unknown connection %s (user %s)",
                external_connection_id,
                user_id,
            )
            return None

        candidate = BankConnection.from_aggregator(
            user_id=user_id,
            remote=remote,
            synced_at=utc_now(),
        )
        connection = await self._connection_repo.upsert(candidate)

        if connection.user_id != user_id:
            logger.warning(
                "Callback for connection %s named user %s, but it belongs to %s; "
                "owner left unchanged",
                external_connection_id,
                user_id,
                connection.user_id,
            )

        logger.info(
            "Connection %s is %s",
            external_connection_id,
            connection.status.value,
        )

        await self._account_sync.execute(connection)
        return connection

"""Sync accounts across all active connections of a user."""

from __future__ import annotations

import asyncio
import logging

from vita.application.commands.banking.account_sync_command import (
    AccountSyncCommand,
)
from vita.application.dtos.banking import (
    AccountSyncResult,
    BatchSyncResult,
    ConnectionSyncFailure,
)
from vita.application.factories import RepositoryScope
from vita.domain.banking.entities import BankConnection
from vita.domain.banking.ports import AggregatorPort
from vita.domain.shared.time import utc_now

logger = logging.getLogger(__name__)


class BatchSyncCommand:
    """
    Run account sync for every active connection concurrently.

    Each connection gets its own unit of work, so a failure in one rolls
    back only that connection. Results are aggregated; the batch
    succeeds only if every connection did.
    """

    def __init__(
        self,
        scope: RepositoryScope,
        aggregator: AggregatorPort,
        max_concurrency: int = 4,
    ):
        self._scope = scope
        self._aggregator = aggregator
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def execute(self, user_id: str) -> BatchSyncResult:
        result = BatchSyncResult(user_id=user_id, synced_at=utc_now())

        async with self._scope() as factory:
            connection_repo = factory.bank_connection_repository()
            connections = await connection_repo.find_active_by_user(user_id)

        if not connections:
            logger.info("No active bank connections for user %s", user_id)
            return result

        outcomes = await asyncio.gather(
            *(self._sync_connection(connection) for connection in connections),
            return_exceptions=True,
        )

        for connection, outcome in zip(connections, outcomes):
            if isinstance(outcome, AccountSyncResult):
                result.results.append(outcome)
                continue
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error(
                "Account sync failed for connection %s (%s): %s",
                connection.external_connection_id,
                type(outcome).__name__,
                outcome,
            )
            result.failures.append(
                ConnectionSyncFailure(
                    connection_id=connection.id,
                    external_connection_id=connection.external_connection_id,
                    error_message=str(outcome) or type(outcome).__name__,
                ),
            )

        logger.info(
            "Synced %d of %d connection(s) for user %s",
            result.connections_synced,
            len(connections),
            user_id,
        )
        return result

    async def _sync_connection(self, connection: BankConnection) -> AccountSyncResult:
        async with self._semaphore, self._scope() as factory:
            command = AccountSyncCommand.from_factory(factory, self._aggregator)
            return await command.execute(connection)

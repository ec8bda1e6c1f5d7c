"""Discover and update the bank accounts under one connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vita.application.dtos.banking import AccountSyncResult
from vita.domain.banking.entities import BankAccount, BankConnection
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.repositories import (
    BankAccountRepository,
    BankConnectionRepository,
)
from vita.domain.shared.exceptions import ValidationError
from vita.domain.shared.time import utc_now

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory

logger = logging.getLogger(__name__)


class AccountSyncCommand:
    """
    Upsert every account the aggregator reports under a connection.

    Accounts known locally but no longer reported are left untouched;
    they are only deactivated by an explicit disconnect. Aggregator and
    store failures propagate so that bulk syncs see per-connection errors.
    A single malformed account is logged and skipped.
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
    ) -> AccountSyncCommand:
        return cls(
            aggregator=aggregator,
            connection_repo=factory.bank_connection_repository(),
            account_repo=factory.bank_account_repository(),
        )

    async def execute(self, connection: BankConnection) -> AccountSyncResult:
        remote_accounts = await self._aggregator.get_accounts(
            connection.external_connection_id,
        )

        accounts: list[BankAccount] = []
        skipped = 0
        for remote in remote_accounts:
            try:
                accounts.append(BankAccount.from_aggregator(connection.id, remote))
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    "Skipping account %s of connection %s: %s",
                    remote.id,
                    connection.external_connection_id,
                    e,
                )

        synced = len(await self._account_repo.upsert_many(accounts))

        synced_at = utc_now()
        connection.mark_synced(synced_at)
        await self._connection_repo.save(connection)

        logger.info(
            "Synced %d account(s) for connection %s",
            synced,
            connection.external_connection_id,
        )
        return AccountSyncResult(
            connection_id=connection.id,
            external_connection_id=connection.external_connection_id,
            synced_at=synced_at,
            accounts_synced=synced,
            accounts_skipped=skipped,
        )

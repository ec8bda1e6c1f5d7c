"""Banking service facade over the sync commands and queries.

Every operation runs in its own unit of work obtained from the repository
scope: committed when the operation returns, rolled back when it raises.
Sync and disconnect report failure as ``False`` so that callers can offer
a retry; lookups that legitimately find nothing return ``None`` or an
empty list.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from vita.application.commands.banking import (
    BatchSyncCommand,
    DisconnectCommand,
    InitiateConnectionCommand,
    ProcessCallbackCommand,
    RefreshConnectionCommand,
    TransactionSyncCommand,
)
from vita.application.queries.banking import (
    ListBankAccountsQuery,
    ListBankTransactionsQuery,
    ListConnectionsQuery,
    TotalBalanceQuery,
)
from vita.domain.banking.entities import BankAccount, BankConnection, BankTransaction
from vita.domain.banking.ports import AggregatorPort

if TYPE_CHECKING:
    from vita.application.factories import RepositoryScope
    from vita_config import Settings

logger = logging.getLogger(__name__)


class BankingService:
    """Operations offered to the presentation layer."""

    def __init__(  # NOQA: PLR0913
        self,
        scope: RepositoryScope,
        aggregator: AggregatorPort,
        provider_codes: Optional[list[str]] = None,
        default_currency: str = "DKK",
        default_window_days: int = 30,
        overlap_days: int = 1,
        max_concurrency: int = 4,
    ):
        self._scope = scope
        self._aggregator = aggregator
        self._provider_codes = provider_codes
        self._default_currency = default_currency
        self._default_window_days = default_window_days
        self._overlap_days = overlap_days
        self._max_concurrency = max_concurrency

    @classmethod
    def from_settings(
        cls,
        scope: RepositoryScope,
        aggregator: AggregatorPort,
        settings: Settings,
    ) -> BankingService:
        return cls(
            scope=scope,
            aggregator=aggregator,
            provider_codes=settings.provider_codes,
            default_currency=settings.default_currency,
            default_window_days=settings.sync_default_window_days,
            overlap_days=settings.sync_overlap_days,
            max_concurrency=settings.sync_max_concurrency,
        )

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    async def initiate_connection(self, user_id: str, return_url: str) -> str:
        """Return the URL of the aggregator's hosted consent flow."""
        command = InitiateConnectionCommand(self._aggregator, self._provider_codes)
        return await command.execute(user_id, return_url)

    async def process_callback(
        self,
        external_connection_id: str,
        user_id: str,
    ) -> Optional[BankConnection]:
        """Record a connection from the aggregator callback and sync its accounts.

        Connection upsert and account sync commit together. Aggregator
        failures propagate.
        """
        async with self._scope() as factory:
            command = ProcessCallbackCommand.from_factory(factory, self._aggregator)
            return await command.execute(external_connection_id, user_id)

    async def disconnect(self, user_id: str, connection_id: UUID) -> bool:
        try:
            async with self._scope() as factory:
                command = DisconnectCommand.from_factory(factory, self._aggregator)
                return await command.execute(user_id, connection_id)
        except Exception:
            logger.exception(
                "Disconnect of connection %s for user %s failed",
                connection_id,
                user_id,
            )
            return False

    async def refresh_connection(self, user_id: str, connection_id: UUID) -> bool:
        async with self._scope() as factory:
            command = RefreshConnectionCommand.from_factory(factory, self._aggregator)
            return await command.execute(user_id, connection_id)

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    async def sync_all(self, user_id: str) -> bool:
        """Sync accounts of every active connection; True only if all succeed."""
        command = BatchSyncCommand(
            scope=self._scope,
            aggregator=self._aggregator,
            max_concurrency=self._max_concurrency,
        )
        try:
            result = await command.execute(user_id)
        except Exception:
            logger.exception("Bulk sync for user %s failed", user_id)
            return False

        for failure in result.failures:
            logger.warning(
                "Connection %s failed to sync: %s",
                failure.external_connection_id,
                failure.error_message,
            )
        return result.success

    async def sync_transactions(self, account_id: UUID) -> bool:
        try:
            async with self._scope() as factory:
                command = TransactionSyncCommand.from_factory(
                    factory,
                    self._aggregator,
                    default_window_days=self._default_window_days,
                    overlap_days=self._overlap_days,
                )
                result = await command.execute(account_id)
        except Exception:
            logger.exception("Transaction sync for account %s failed", account_id)
            return False

        if not result.success:
            logger.warning(
                "Transaction sync for account %s failed: %s",
                account_id,
                result.error_message,
            )
        return result.success

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_connections(self, user_id: str) -> list[BankConnection]:
        async with self._scope() as factory:
            return await ListConnectionsQuery.from_factory(factory).execute(user_id)

    async def list_accounts(self, user_id: str) -> list[BankAccount]:
        async with self._scope() as factory:
            return await ListBankAccountsQuery.from_factory(factory).execute(user_id)

    async def list_transactions(
        self,
        user_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[BankTransaction]:
        async with self._scope() as factory:
            query = ListBankTransactionsQuery.from_factory(factory)
            return await query.execute(user_id, from_date, to_date)

    async def get_total_balance(
        self,
        user_id: str,
        currency: Optional[str] = None,
    ) -> Decimal:
        async with self._scope() as factory:
            query = TotalBalanceQuery.from_factory(
                factory,
                default_currency=self._default_currency,
            )
            return await query.execute(user_id, currency)

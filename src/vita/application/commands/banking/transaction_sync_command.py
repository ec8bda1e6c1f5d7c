"""Incrementally sync bank transactions for one account."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Callable, Optional
from uuid import UUID

from vita.application.dtos.banking import TransactionSyncResult
from vita.domain.banking.entities import BankAccount, BankConnection, BankTransaction
from vita.domain.banking.exceptions import (
    BankAccountNotFoundError,
    BankConnectionNotFoundError,
)
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.repositories import (
    BankAccountRepository,
    BankConnectionRepository,
    BankTransactionRepository,
)
from vita.domain.shared.exceptions import (
    BusinessRuleViolation,
    DomainException,
    ErrorCode,
    ValidationError,
)
from vita.domain.shared.time import today_utc, utc_now

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
DEFAULT_OVERLAP_DAYS = 1


class TransactionSyncCommand:
    """Fetch an account's recent transactions and store the unseen ones."""

    def __init__(  # NOQA: PLR0913
        self,
        aggregator: AggregatorPort,
        connection_repo: BankConnectionRepository,
        account_repo: BankAccountRepository,
        transaction_repo: BankTransactionRepository,
        default_window_days: int = DEFAULT_WINDOW_DAYS,
        overlap_days: int = DEFAULT_OVERLAP_DAYS,
        today: Callable[[], date] = today_utc,
    ):
        self._aggregator = aggregator
        self._connection_repo = connection_repo
        self._account_repo = account_repo
        self._transaction_repo = transaction_repo
        self._default_window_days = default_window_days
        self._overlap_days = overlap_days
        self._today = today

    @classmethod
    def from_factory(
        cls,
        factory: RepositoryFactory,
        aggregator: AggregatorPort,
        default_window_days: int = DEFAULT_WINDOW_DAYS,
        overlap_days: int = DEFAULT_OVERLAP_DAYS,
    ) -> TransactionSyncCommand:
        return cls(
            aggregator=aggregator,
            connection_repo=factory.bank_connection_repository(),
            account_repo=factory.bank_account_repository(),
            transaction_repo=factory.bank_transaction_repository(),
            default_window_days=default_window_days,
            overlap_days=overlap_days,
        )

    async def execute(self, account_id: UUID) -> TransactionSyncResult:
        """
        Sync one account.

        The window starts ``overlap_days`` before the latest stored
        bank transaction, or ``default_window_days`` ago when nothing is
        stored yet, and ends today. Records already stored (by external id)
        are skipped. A malformed record is counted as failed and the rest
        of the batch is still stored.

        Aggregator failures are reported in the result, not raised.
        """
        synced_at = utc_now()

        try:
            account, connection = await self._load(account_id)
        except DomainException as e:
            logger.warning("Transaction sync for account %s skipped: %s", account_id, e)
            return self._failed(account_id, synced_at, e.message)

        start_date, end_date = await self._sync_window(account)

        try:
            remote_transactions = await self._aggregator.get_transactions(
                account.external_account_id,
                from_date=start_date,
                to_date=end_date,
            )
        except DomainException as e:
            logger.error(
                "Fetching transactions failed for account %s: %s",
                account.external_account_id,
                e,
            )
            return self._failed(
                account_id,
                synced_at,
                e.message,
                start_date=start_date,
                end_date=end_date,
            )

        candidates: list[BankTransaction] = []
        failed = 0
        for remote in remote_transactions:
            try:
                candidates.append(
                    BankTransaction.from_aggregator(
                        user_id=connection.user_id,
                        bank_account_id=account.id,
                        remote=remote,
                    ),
                )
            except ValidationError as e:
                failed += 1
                logger.warning("Skipping bank transaction %s: %s", remote.id, e)

        inserted = await self._transaction_repo.add_new(candidates)

        logger.info(
            "Account %s: fetched %d, inserted %d, skipped %d, failed %d (%s to %s)",
            account.external_account_id,
            len(remote_transactions),
            len(inserted),
            len(candidates) - len(inserted),
            failed,
            start_date,
            end_date,
        )
        return TransactionSyncResult(
            success=True,
            synced_at=synced_at,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            transactions_fetched=len(remote_transactions),
            transactions_inserted=len(inserted),
            transactions_skipped=len(candidates) - len(inserted),
            transactions_failed=failed,
        )

    async def _load(self, account_id: UUID) -> tuple[BankAccount, BankConnection]:
        account = await self._account_repo.find_by_id(account_id)
        if account is None:
            raise BankAccountNotFoundError(account_id)
        if not account.is_active:
            msg = f"Bank account '{account_id}' is inactive"
            raise BusinessRuleViolation(msg, code=ErrorCode.INACTIVE_ACCOUNT)

        connection = await self._connection_repo.find_by_id(account.connection_id)
        if connection is None:
            raise BankConnectionNotFoundError(account.connection_id)
        return account, connection

    async def _sync_window(self, account: BankAccount) -> tuple[date, date]:
        end_date = self._today()
        latest = await self._transaction_repo.get_latest_bank_date(account.id)
        if latest is not None:
            start_date = latest - timedelta(days=self._overlap_days)
        else:
            start_date = end_date - timedelta(days=self._default_window_days)
        return start_date, end_date

    def _failed(
        self,
        account_id: UUID,
        synced_at: datetime,
        message: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TransactionSyncResult:
        return TransactionSyncResult(
            success=False,
            synced_at=synced_at,
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            error_message=message,
        )

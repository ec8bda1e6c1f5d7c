"""DTOs for account and transaction sync results."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class AccountSyncResult:
    """Result of one account-sync pass over a connection."""

    connection_id: UUID
    external_connection_id: str
    synced_at: datetime
    accounts_synced: int
    accounts_skipped: int = 0


@dataclass(frozen=True)
class ConnectionSyncFailure:
    connection_id: UUID
    external_connection_id: str
    error_message: str


@dataclass
class BatchSyncResult:
    """Result of syncing every active connection of a user.

    Connections that succeeded keep their changes even when others fail.
    """

    user_id: str
    synced_at: datetime
    results: list[AccountSyncResult] = field(default_factory=list)
    failures: list[ConnectionSyncFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def connections_synced(self) -> int:
        return len(self.results)

    @property
    def total_accounts_synced(self) -> int:
        return sum(r.accounts_synced for r in self.results)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "user_id": self.user_id,
            "synced_at": self.synced_at.isoformat(),
            "connections_synced": self.connections_synced,
            "total_accounts_synced": self.total_accounts_synced,
            "failures": [
                {
                    "connection_id": str(f.connection_id),
                    "external_connection_id": f.external_connection_id,
                    "error": f.error_message,
                }
                for f in self.failures
            ],
        }


@dataclass(frozen=True)
class TransactionSyncResult:
    """Result of a transaction sync for one account.

    This DTO provides structured information about the window that was
    requested and what happened to each fetched record.
    """

    success: bool
    synced_at: datetime
    account_id: UUID
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    transactions_fetched: int = 0
    transactions_inserted: int = 0
    transactions_skipped: int = 0
    transactions_failed: int = 0
    error_message: Optional[str] = None

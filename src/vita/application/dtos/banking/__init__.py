"""Banking DTOs."""

from vita.application.dtos.banking.sync_result import (
    AccountSyncResult,
    BatchSyncResult,
    ConnectionSyncFailure,
    TransactionSyncResult,
)

__all__ = [
    "AccountSyncResult",
    "BatchSyncResult",
    "ConnectionSyncFailure",
    "TransactionSyncResult",
]

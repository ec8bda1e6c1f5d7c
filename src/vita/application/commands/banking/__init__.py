"""Banking commands."""

from vita.application.commands.banking.account_sync_command import (
    AccountSyncCommand,
)
from vita.application.commands.banking.batch_sync_command import BatchSyncCommand
from vita.application.commands.banking.disconnect_command import DisconnectCommand
from vita.application.commands.banking.initiate_connection_command import (
    InitiateConnectionCommand,
)
from vita.application.commands.banking.process_callback_command import (
    ProcessCallbackCommand,
)
from vita.application.commands.banking.refresh_connection_command import (
    RefreshConnectionCommand,
)
from vita.application.commands.banking.transaction_sync_command import (
    TransactionSyncCommand,
)

__all__ = [
    "AccountSyncCommand",
    "BatchSyncCommand",
    "DisconnectCommand",
    "InitiateConnectionCommand",
    "ProcessCallbackCommand",
    "RefreshConnectionCommand",
    "TransactionSyncCommand",
]

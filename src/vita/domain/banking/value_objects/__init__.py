"""Value objects for banking domain."""

from vita.domain.banking.value_objects.aggregator_account import (
    AggregatorAccount,
    AggregatorAccountExtra,
)
from vita.domain.banking.value_objects.aggregator_connection import (
    AggregatorConnection,
)
from vita.domain.banking.value_objects.aggregator_transaction import (
    AggregatorTransaction,
    AggregatorTransactionExtra,
)
from vita.domain.banking.value_objects.connect_session import ConnectSession
from vita.domain.banking.value_objects.connection_status import ConnectionStatus

__all__ = [
    "AggregatorAccount",
    "AggregatorAccountExtra",
    "AggregatorConnection",
    "AggregatorTransaction",
    "AggregatorTransactionExtra",
    "ConnectSession",
    "ConnectionStatus",
]

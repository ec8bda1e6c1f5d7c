"""Banking queries."""

from vita.application.queries.banking.list_bank_accounts_query import (
    ListBankAccountsQuery,
)
from vita.application.queries.banking.list_bank_transactions_query import (
    ListBankTransactionsQuery,
)
from vita.application.queries.banking.list_connections_query import (
    ListConnectionsQuery,
)
from vita.application.queries.banking.total_balance_query import TotalBalanceQuery

__all__ = [
    "ListBankAccountsQuery",
    "ListBankTransactionsQuery",
    "ListConnectionsQuery",
    "TotalBalanceQuery",
]

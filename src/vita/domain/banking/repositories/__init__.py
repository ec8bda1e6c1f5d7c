"""Repository interfaces for banking domain."""

from vita.domain.banking.repositories.bank_account_repository import (
    BankAccountRepository,
)
from vita.domain.banking.repositories.bank_connection_repository import (
    BankConnectionRepository,
)
from vita.domain.banking.repositories.bank_transaction_repository import (
    BankTransactionRepository,
)

__all__ = [
    "BankAccountRepository",
    "BankConnectionRepository",
    "BankTransactionRepository",
]

"""Banking SQLAlchemy repositories."""

from vita.infrastructure.persistence.sqlalchemy.repositories.banking.bank_account_repository import (  # NOQA: E501
    BankAccountRepositorySQLAlchemy,
)
from vita.infrastructure.persistence.sqlalchemy.repositories.banking.bank_connection_repository import (  # NOQA: E501
    BankConnectionRepositorySQLAlchemy,
)
from vita.infrastructure.persistence.sqlalchemy.repositories.banking.bank_transaction_repository import (  # NOQA: E501
    BankTransactionRepositorySQLAlchemy,
)

__all__ = [
    "BankAccountRepositorySQLAlchemy",
    "BankConnectionRepositorySQLAlchemy",
    "BankTransactionRepositorySQLAlchemy",
]

"""SQLAlchemy repository implementations."""

from vita.infrastructure.persistence.sqlalchemy.repositories.banking import (
    BankAccountRepositorySQLAlchemy,
    BankConnectionRepositorySQLAlchemy,
    BankTransactionRepositorySQLAlchemy,
)
from vita.infrastructure.persistence.sqlalchemy.repositories.factory import (
    SQLAlchemyRepositoryFactory,
)

__all__ = [
    "BankAccountRepositorySQLAlchemy",
    "BankConnectionRepositorySQLAlchemy",
    "BankTransactionRepositorySQLAlchemy",
    "SQLAlchemyRepositoryFactory",
]

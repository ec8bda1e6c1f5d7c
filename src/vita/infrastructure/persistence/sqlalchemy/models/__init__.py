"""SQLAlchemy models."""

from vita.infrastructure.persistence.sqlalchemy.models.banking import (
    BankAccountModel,
    BankConnectionModel,
    BankTransactionModel,
)
from vita.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)

__all__ = [
    "BankAccountModel",
    "BankConnectionModel",
    "BankTransactionModel",
    "Base",
    "TimestampMixin",
]

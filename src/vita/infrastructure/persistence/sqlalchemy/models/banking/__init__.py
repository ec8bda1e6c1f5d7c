"""Banking domain SQLAlchemy models."""

from vita.infrastructure.persistence.sqlalchemy.models.banking.bank_account_model import (  # NOQA: E501
    BankAccountModel,
)
from vita.infrastructure.persistence.sqlalchemy.models.banking.bank_connection_model import (  # NOQA: E501
    BankConnectionModel,
)
from vita.infrastructure.persistence.sqlalchemy.models.banking.bank_transaction_model import (  # NOQA: E501
    BankTransactionModel,
)

__all__ = [
    "BankAccountModel",
    "BankConnectionModel",
    "BankTransactionModel",
]

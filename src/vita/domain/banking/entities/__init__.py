"""Entities for banking domain."""

from vita.domain.banking.entities.bank_account import BankAccount, normalize_currency
from vita.domain.banking.entities.bank_connection import BankConnection
from vita.domain.banking.entities.bank_transaction import (
    TRANSACTION_TYPE_CREDIT,
    TRANSACTION_TYPE_DEBIT,
    BankTransaction,
    transaction_type_for,
)

__all__ = [
    "TRANSACTION_TYPE_CREDIT",
    "TRANSACTION_TYPE_DEBIT",
    "BankAccount",
    "BankConnection",
    "BankTransaction",
    "normalize_currency",
    "transaction_type_for",
]

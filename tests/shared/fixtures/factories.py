"""
Test data factories for aggregator payloads and domain entities.

Use fixed ids and predictable values to keep tests reproducible.

Usage:
    from tests.shared.fixtures.factories import remote_account

    account = remote_account("acc_1", balance="100.00", currency="DKK")
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from vita.domain.banking.entities import BankAccount, BankConnection
from vita.domain.banking.value_objects import (
    AggregatorAccount,
    AggregatorAccountExtra,
    AggregatorConnection,
    AggregatorTransaction,
    AggregatorTransactionExtra,
)

USER_ID = "user_1"
OTHER_USER_ID = "user_2"
CONSENT_EXPIRES_AT = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


def remote_connection(
    external_id: str = "conn_1",
    status: str = "active",
    provider_code: str = "nordea_dk",
    provider_name: str = "Nordea",
    customer_id: str = USER_ID,
) -> AggregatorConnection:
    return AggregatorConnection(
        id=external_id,
        customer_id=customer_id,
        provider_code=provider_code,
        provider_name=provider_name,
        status=status,
        consent_expires_at=CONSENT_EXPIRES_AT,
    )


def remote_account(
    external_id: str = "acc_1",
    balance: str = "100.00",
    currency: str = "DKK",
    name: Optional[str] = None,
    connection_id: str = "conn_1",
    iban: Optional[str] = None,
) -> AggregatorAccount:
    return AggregatorAccount(
        id=external_id,
        connection_id=connection_id,
        name=name or f"Account {external_id}",
        nature="checking",
        balance=Decimal(balance),
        currency_code=currency,
        extra=AggregatorAccountExtra(iban=iban) if iban else None,
    )


def remote_transaction(
    external_id: str,
    made_on: date,
    amount: str = "-25.00",
    currency: str = "DKK",
    account_id: str = "acc_1",
    mode: str = "normal",
    merchant: Optional[str] = None,
) -> AggregatorTransaction:
    return AggregatorTransaction(
        id=external_id,
        account_id=account_id,
        mode=mode,
        made_on=made_on,
        amount=Decimal(amount),
        currency_code=currency,
        description=f"Transaction {external_id}",
        extra=AggregatorTransactionExtra(merchant=merchant) if merchant else None,
    )


def bank_connection(
    external_id: str = "conn_1",
    user_id: str = USER_ID,
    status: str = "active",
) -> BankConnection:
    return BankConnection.from_aggregator(
        user_id,
        remote_connection(external_id, status=status, customer_id=user_id),
    )


def bank_account(
    connection_id: UUID,
    external_id: str = "acc_1",
    balance: str = "100.00",
    currency: str = "DKK",
) -> BankAccount:
    return BankAccount.from_aggregator(
        connection_id,
        remote_account(external_id, balance=balance, currency=currency),
    )

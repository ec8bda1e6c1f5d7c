"""Bank account entity."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from vita.domain.banking.value_objects import AggregatorAccount
from vita.domain.shared.exceptions import ErrorCode, ValidationError
from vita.domain.shared.time import utc_now


def normalize_currency(value: str) -> str:
    code = (value or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        msg = f"Invalid ISO currency code: {value!r}"
        raise ValidationError(msg, code=ErrorCode.INVALID_CURRENCY)
    return code


class BankAccount:
    """
    A real-world account held at a bank, discovered under a connection.

    This is distinct from any in-app ledger account. The balance is always
    the latest value observed from the aggregator; no balance history is
    kept here. (connection_id, external_account_id) is unique.
    """

    def __init__(  # NOQA: PLR0913
        self,
        connection_id: UUID,
        external_account_id: str,
        name: str,
        account_type: str,
        currency: str,
        balance: Decimal,
        available_balance: Optional[Decimal] = None,
        iban: Optional[str] = None,
        account_number: Optional[str] = None,
        swift_code: Optional[str] = None,
        is_active: bool = True,
        id: Optional[UUID] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        if not external_account_id:
            msg = "Bank account requires an external account id"
            raise ValidationError(msg)

        now = utc_now()
        self._id = id if id is not None else uuid4()
        self._connection_id = connection_id
        self._external_account_id = external_account_id
        self._name = name
        self._account_type = account_type
        self._currency = normalize_currency(currency)
        self._balance = Decimal(balance)
        self._available_balance = available_balance
        self._iban = iban.replace(" ", "").upper() if iban else None
        self._account_number = account_number
        self._swift_code = swift_code
        self._is_active = is_active
        self._created_at = created_at or now
        self._updated_at = updated_at or now

    @classmethod
    def from_aggregator(
        cls,
        connection_id: UUID,
        remote: AggregatorAccount,
    ) -> BankAccount:
        extra = remote.extra
        return cls(
            connection_id=connection_id,
            external_account_id=remote.id,
            name=remote.name,
            account_type=remote.nature,
            currency=remote.currency_code,
            balance=remote.balance,
            available_balance=remote.available_balance,
            iban=extra.iban if extra else None,
            account_number=extra.account_number if extra else None,
            swift_code=extra.swift if extra else None,
        )

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def connection_id(self) -> UUID:
        return self._connection_id

    @property
    def external_account_id(self) -> str:
        return self._external_account_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def account_type(self) -> str:
        return self._account_type

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def available_balance(self) -> Optional[Decimal]:
        return self._available_balance

    @property
    def iban(self) -> Optional[str]:
        return self._iban

    @property
    def account_number(self) -> Optional[str]:
        return self._account_number

    @property
    def swift_code(self) -> Optional[str]:
        return self._swift_code

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def deactivate(self) -> None:
        self._is_active = False
        self._updated_at = utc_now()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BankAccount):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return f"{self._name} ({self._balance} {self._currency})"

    def __repr__(self) -> str:
        return (
            f"BankAccount(id={self._id}, "
            f"external_id={self._external_account_id!r}, "
            f"balance={self._balance} {self._currency})"
        )

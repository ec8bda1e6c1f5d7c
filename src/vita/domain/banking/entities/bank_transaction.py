"""Bank-sourced transaction entity."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from vita.domain.banking.entities.bank_account import normalize_currency
from vita.domain.banking.value_objects import AggregatorTransaction
from vita.domain.shared.exceptions import ValidationError
from vita.domain.shared.time import utc_now

TRANSACTION_TYPE_DEBIT = "debit"
TRANSACTION_TYPE_CREDIT = "credit"
_PASSTHROUGH_MODES = ("fee", "transfer")


def transaction_type_for(mode: Optional[str], amount: Decimal) -> str:
    """Label a transaction as debit, credit, fee or transfer."""
    normalized = (mode or "").strip().lower()
    if normalized in _PASSTHROUGH_MODES:
        return normalized
    return TRANSACTION_TYPE_DEBIT if amount < 0 else TRANSACTION_TYPE_CREDIT


class BankTransaction:
    """
    One posted movement on a bank account.

    Immutable once created: a later sync that sees the same external
    transaction id again is a no-op. The account reference is weak; the
    transaction survives (with ``bank_account_id=None``) if the account row
    is removed.
    """

    def __init__(  # NOQA: PLR0913
        self,
        user_id: str,
        bank_account_id: Optional[UUID],
        external_transaction_id: Optional[str],
        amount: Decimal,
        currency: str,
        booked_on: date,
        description: str = "",
        merchant_name: Optional[str] = None,
        category: Optional[str] = None,
        transaction_type: str = TRANSACTION_TYPE_DEBIT,
        status: Optional[str] = None,
        running_balance: Optional[Decimal] = None,
        extra_data: Optional[str] = None,
        is_from_bank: bool = True,
        transaction_id: Optional[str] = None,
        id: Optional[UUID] = None,
        created_at: Optional[datetime] = None,
    ):
        if is_from_bank and not external_transaction_id:
            msg = "Bank-sourced transactions require an external transaction id"
            raise ValidationError(msg)

        self._id = id if id is not None else uuid4()
        self._transaction_id = transaction_id or str(uuid4())
        self._user_id = user_id
        self._bank_account_id = bank_account_id
        self._external_transaction_id = external_transaction_id
        self._amount = Decimal(amount)
        self._currency = normalize_currency(currency)
        self._booked_on = booked_on
        self._description = description
        self._merchant_name = merchant_name
        self._category = category
        self._transaction_type = transaction_type
        self._status = status
        self._running_balance = running_balance
        self._extra_data = extra_data
        self._is_from_bank = is_from_bank
        self._created_at = created_at or utc_now()

    @classmethod
    def from_aggregator(
        cls,
        user_id: str,
        bank_account_id: UUID,
        remote: AggregatorTransaction,
    ) -> BankTransaction:
        return cls(
            user_id=user_id,
            bank_account_id=bank_account_id,
            external_transaction_id=remote.id,
            amount=remote.amount,
            currency=remote.currency_code,
            booked_on=remote.made_on,
            description=remote.description,
            merchant_name=remote.merchant,
            category=remote.category,
            transaction_type=transaction_type_for(remote.mode, remote.amount),
            status=remote.status,
            running_balance=remote.running_balance,
            extra_data=remote.extra_json(),
            is_from_bank=True,
        )

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def transaction_id(self) -> str:
        return self._transaction_id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def bank_account_id(self) -> Optional[UUID]:
        return self._bank_account_id

    @property
    def external_transaction_id(self) -> Optional[str]:
        return self._external_transaction_id

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def booked_on(self) -> date:
        return self._booked_on

    @property
    def description(self) -> str:
        return self._description

    @property
    def merchant_name(self) -> Optional[str]:
        return self._merchant_name

    @property
    def category(self) -> Optional[str]:
        return self._category

    @property
    def transaction_type(self) -> str:
        return self._transaction_type

    @property
    def status(self) -> Optional[str]:
        return self._status

    @property
    def running_balance(self) -> Optional[Decimal]:
        return self._running_balance

    @property
    def extra_data(self) -> Optional[str]:
        return self._extra_data

    @property
    def is_from_bank(self) -> bool:
        return self._is_from_bank

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def is_credit(self) -> bool:
        return self._amount > 0

    def is_debit(self) -> bool:
        return self._amount < 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BankTransaction):
            return False
        return self._transaction_id == other._transaction_id

    def __hash__(self) -> int:
        return hash(self._transaction_id)

    def __str__(self) -> str:
        direction = "+" if self.is_credit() else ""
        return (
            f"{self._booked_on}: {direction}{self._amount} {self._currency} "
            f"- {self._description[:50]}"
        )

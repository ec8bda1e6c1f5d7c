"""Aggregator account value object."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class AggregatorAccountExtra(BaseModel):
    """Source-specific account fields. Unknown keys are kept."""

    iban: str | None = None
    account_number: str | None = None
    swift: str | None = None
    available_amount: Decimal | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class AggregatorAccount(BaseModel):
    """A bank account as reported by the aggregator."""

    id: str = Field(..., min_length=1, description="External account id")
    connection_id: str | None = None
    name: str = Field(..., max_length=255)
    nature: str = Field(default="account", max_length=100)
    balance: Decimal
    currency_code: str = Field(..., min_length=3, max_length=3)
    extra: AggregatorAccountExtra | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_serializer("balance")
    def serialize_balance(self, value: Decimal) -> str:
        return str(value)

    @property
    def available_balance(self) -> Decimal | None:
        return self.extra.available_amount if self.extra else None

    def __str__(self) -> str:
        return f"{self.name} ({self.balance} {self.currency_code})"

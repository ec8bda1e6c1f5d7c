"""Aggregator transaction value object."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class AggregatorTransactionExtra(BaseModel):
    """Source-specific transaction fields. Unknown keys are kept."""

    merchant: str | None = None
    original_amount: Decimal | None = None
    original_currency_code: str | None = None
    running_balance: Decimal | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class AggregatorTransaction(BaseModel):
    """A posted transaction as reported by the aggregator."""

    id: str = Field(..., min_length=1, description="External transaction id")
    account_id: str | None = None
    duplicated: bool = False
    mode: str = Field(default="normal", description="normal, fee or transfer")
    status: str = Field(default="posted", max_length=50)
    made_on: date
    amount: Decimal
    currency_code: str = Field(..., min_length=3, max_length=3)
    description: str = ""
    category: str | None = None
    extra: AggregatorTransactionExtra | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)

    @field_serializer("made_on")
    def serialize_date(self, value: date) -> str:
        return value.isoformat()

    @property
    def merchant(self) -> str | None:
        return self.extra.merchant if self.extra else None

    @property
    def running_balance(self) -> Decimal | None:
        return self.extra.running_balance if self.extra else None

    def extra_json(self) -> str | None:
        """Serialize the source-specific fields for opaque storage."""
        if self.extra is None:
            return None
        return self.extra.model_dump_json(exclude_none=True)

    def __str__(self) -> str:
        return (
            f"{self.made_on}: {self.amount} {self.currency_code} "
            f"- {self.description[:50]}"
        )

"""Aggregator connection value object."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from vita.domain.banking.value_objects.connection_status import ConnectionStatus


class AggregatorConnection(BaseModel):
    """A connection as reported by the aggregator.

    This is the aggregator's view; the local lifecycle record is the
    BankConnection entity.
    """

    id: str = Field(..., min_length=1, description="External connection id")
    customer_id: str | None = None
    provider_id: str | None = None
    provider_code: str = Field(default="", max_length=100)
    provider_name: str = Field(default="", max_length=255)
    status: str = Field(..., description="Raw aggregator status")
    categorization: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    consent_given_at: datetime | None = None
    consent_expires_at: datetime | None = None

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @property
    def lifecycle_status(self) -> ConnectionStatus:
        return ConnectionStatus.from_aggregator(self.status)

"""Hosted consent-flow session value object."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ConnectSession(BaseModel):
    """URL of the aggregator's hosted consent flow for one user."""

    connect_url: str = Field(..., min_length=1)
    expires_at: datetime | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

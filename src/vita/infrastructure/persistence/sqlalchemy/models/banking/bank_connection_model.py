"""SQLAlchemy model for bank connections."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vita.domain.shared.time import utc_now
from vita.infrastructure.persistence.sqlalchemy.models.base import Base

if TYPE_CHECKING:
    from vita.infrastructure.persistence.sqlalchemy.models.banking.bank_account_model import (  # NOQA: E501
        BankAccountModel,
    )


class BankConnectionModel(Base):
    """Database model for a user's link to one institution via the aggregator."""

    __tablename__ = "bank_connections"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # Owner (opaque id from the identity provider)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Aggregator-assigned id, the callback matching key
    external_connection_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # Institution
    bank_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    bank_code: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # Lifecycle
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    status_message: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    last_sync_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    consent_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
    )

    accounts: Mapped[list[BankAccountModel]] = relationship(
        "BankAccountModel",
        back_populates="connection",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_bank_connection_user_status", "user_id", "status"),)

    def __repr__(self) -> str:
        return (
            f"<BankConnectionModel(id={self.id}, "
            f"external_id={self.external_connection_id}, status={self.status})>"
        )

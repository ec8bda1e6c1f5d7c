"""SQLAlchemy model for bank transactions."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vita.domain.shared.time import utc_now
from vita.infrastructure.persistence.sqlalchemy.models.base import Base


class BankTransactionModel(Base):
    """Database model for bank transactions.

    Deduplication Strategy:
    - external_transaction_id is unique; inserts use ON CONFLICT DO NOTHING,
      so a transaction seen again by a later sync is never inserted twice.
    - Rows are never updated after insert.

    The account reference is weak (ON DELETE SET NULL) and user_id is kept
    on the row, so history survives the removal of an account.
    """

    __tablename__ = "bank_transactions"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # Internal business id, assigned at creation
    transaction_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    bank_account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("bank_accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Dedup key
    external_transaction_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
    )

    # Amount and currency
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    # Description
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    merchant_name: Mapped[Optional[str]] = mapped_column(String(255))
    category: Mapped[Optional[str]] = mapped_column(String(100))
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)

    booked_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[Optional[str]] = mapped_column(String(50))
    running_balance: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2))

    # Serialized source-specific fields
    extra_data: Mapped[Optional[str]] = mapped_column(Text)

    is_from_bank: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_bank_tx_account_date", "bank_account_id", "booked_on"),
        Index("idx_bank_tx_user_date", "user_id", "booked_on"),
    )

    def __repr__(self) -> str:
        return (
            f"<BankTransactionModel(id={self.id}, "
            f"date={self.booked_on}, amount={self.amount})>"
        )

"""SQLAlchemy model for bank accounts."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vita.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)

if TYPE_CHECKING:
    from vita.infrastructure.persistence.sqlalchemy.models.banking.bank_connection_model import (  # NOQA: E501
        BankConnectionModel,
    )


class BankAccountModel(Base, TimestampMixin):
    """Database model for bank accounts discovered under a connection."""

    __tablename__ = "bank_accounts"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    # Owning connection
    connection_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bank_connections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Aggregator-assigned id, scoped to the connection
    external_account_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Account details
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[str] = mapped_column(String(100), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    # Identification
    iban: Mapped[Optional[str]] = mapped_column(String(34))
    account_number: Mapped[Optional[str]] = mapped_column(String(50))
    swift_code: Mapped[Optional[str]] = mapped_column(String(11))

    # Latest observed balances
    balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    available_balance: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2))

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )

    connection: Mapped[BankConnectionModel] = relationship(
        "BankConnectionModel",
        back_populates="accounts",
    )

    __table_args__ = (
        UniqueConstraint(
            "connection_id",
            "external_account_id",
            name="uq_bank_account_connection_external",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<BankAccountModel(id={self.id}, "
            f"external_id={self.external_account_id}, name={self.name})>"
        )

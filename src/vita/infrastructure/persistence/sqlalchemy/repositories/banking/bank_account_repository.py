"""SQLAlchemy implementation of BankAccountRepository."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vita.domain.banking.entities import BankAccount
from vita.domain.banking.repositories import BankAccountRepository
from vita.domain.shared.time import ensure_tz_aware, utc_now
from vita.infrastructure.persistence.sqlalchemy.models import (
    BankAccountModel,
    BankConnectionModel,
)
from vita.infrastructure.persistence.sqlalchemy.repositories._utils import (
    dialect_insert,
)

logger = logging.getLogger(__name__)


class BankAccountRepositorySQLAlchemy(BankAccountRepository):
    """SQLAlchemy implementation of bank account repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def upsert(self, account: BankAccount) -> BankAccount:
        stmt = dialect_insert(self._session, BankAccountModel).values(
            id=account.id,
            connection_id=account.connection_id,
            external_account_id=account.external_account_id,
            name=account.name,
            account_type=account.account_type,
            currency=account.currency,
            iban=account.iban,
            account_number=account.account_number,
            swift_code=account.swift_code,
            balance=account.balance,
            available_balance=account.available_balance,
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                BankAccountModel.connection_id,
                BankAccountModel.external_account_id,
            ],
            set_={
                "name": stmt.excluded.name,
                "balance": stmt.excluded.balance,
                "available_balance": stmt.excluded.available_balance,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(BankAccountModel)

        result = await self._session.execute(
            stmt,
            execution_options={"populate_existing": True},
        )
        model = result.scalar_one()
        logger.debug(
            "Upserted bank account %s (balance=%s %s)",
            model.external_account_id,
            model.balance,
            model.currency,
        )
        return self._map_to_domain(model)

    async def upsert_many(self, accounts: list[BankAccount]) -> list[BankAccount]:
        return [await self.upsert(account) for account in accounts]

    async def find_by_id(self, account_id: UUID) -> Optional[BankAccount]:
        model = await self._session.get(BankAccountModel, account_id)
        return self._map_to_domain(model) if model else None

    async def find_by_connection(self, connection_id: UUID) -> list[BankAccount]:
        stmt = (
            select(BankAccountModel)
            .where(BankAccountModel.connection_id == connection_id)
            .order_by(BankAccountModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    async def find_active_by_user(self, user_id: str) -> list[BankAccount]:
        stmt = (
            select(BankAccountModel)
            .join(
                BankConnectionModel,
                BankAccountModel.connection_id == BankConnectionModel.id,
            )
            .where(
                BankConnectionModel.user_id == user_id,
                BankAccountModel.is_active.is_(True),
            )
            .order_by(BankConnectionModel.bank_name, BankAccountModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    async def deactivate_by_connection(self, connection_id: UUID) -> int:
        stmt = select(BankAccountModel).where(
            BankAccountModel.connection_id == connection_id,
            BankAccountModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        now = utc_now()
        for model in models:
            model.is_active = False
            model.updated_at = now

        await self._session.flush()
        logger.info(
            "Deactivated %d bank account(s) of connection %s",
            len(models),
            connection_id,
        )
        return len(models)

    async def sum_active_balance(self, user_id: str, currency: str) -> Decimal:
        stmt = (
            select(func.sum(BankAccountModel.balance))
            .join(
                BankConnectionModel,
                BankAccountModel.connection_id == BankConnectionModel.id,
            )
            .where(
                BankConnectionModel.user_id == user_id,
                BankAccountModel.is_active.is_(True),
                BankAccountModel.currency == currency.upper(),
            )
        )
        result = await self._session.execute(stmt)
        total = result.scalar_one_or_none()
        return Decimal(str(total)) if total is not None else Decimal("0")

    def _map_to_domain(self, model: BankAccountModel) -> BankAccount:
        return BankAccount(
            id=model.id,
            connection_id=model.connection_id,
            external_account_id=model.external_account_id,
            name=model.name,
            account_type=model.account_type,
            currency=model.currency,
            balance=model.balance,
            available_balance=model.available_balance,
            iban=model.iban,
            account_number=model.account_number,
            swift_code=model.swift_code,
            is_active=model.is_active,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

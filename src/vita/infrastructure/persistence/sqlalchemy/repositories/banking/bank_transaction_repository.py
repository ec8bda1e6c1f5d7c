"""SQLAlchemy implementation of BankTransactionRepository."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vita.domain.banking.entities import BankTransaction
from vita.domain.banking.repositories import BankTransactionRepository
from vita.domain.shared.time import ensure_tz_aware
from vita.infrastructure.persistence.sqlalchemy.models import BankTransactionModel
from vita.infrastructure.persistence.sqlalchemy.repositories._utils import (
    chunked,
    dialect_insert,
)

logger = logging.getLogger(__name__)

# Older SQLite builds (< 3.32) cap a statement at 999 bound parameters,
# one per column per row of a multi-row VALUES clause.
_MAX_BOUND_PARAMETERS = 999
_INSERT_CHUNK_SIZE = _MAX_BOUND_PARAMETERS // len(
    BankTransactionModel.__table__.columns,
)


class BankTransactionRepositorySQLAlchemy(BankTransactionRepository):
    """SQLAlchemy implementation of bank transaction repository.

    Deduplicates on external transaction id with INSERT ... ON CONFLICT DO
    NOTHING, so concurrent syncs of the same account cannot double-insert.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add_new(self, transactions: list[BankTransaction]) -> list[str]:
        unique: dict[str, BankTransaction] = {}
        for tx in transactions:
            key = tx.external_transaction_id
            if key and key not in unique:
                unique[key] = tx

        if not unique:
            return []

        inserted: list[str] = []
        for batch in chunked(list(unique.values()), _INSERT_CHUNK_SIZE):
            stmt = (
                dialect_insert(self._session, BankTransactionModel)
                .values([self._to_row(tx) for tx in batch])
                .on_conflict_do_nothing(
                    index_elements=[BankTransactionModel.external_transaction_id],
                )
                .returning(BankTransactionModel.external_transaction_id)
            )
            result = await self._session.execute(stmt)
            inserted.extend(result.scalars().all())

        skipped = len(transactions) - len(inserted)
        if inserted:
            logger.info("Saved %d new bank transaction(s)", len(inserted))
        if skipped > 0:
            logger.info("Skipped %d existing bank transaction(s)", skipped)

        return inserted

    async def get_latest_bank_date(self, bank_account_id: UUID) -> Optional[date]:
        stmt = select(func.max(BankTransactionModel.booked_on)).where(
            BankTransactionModel.bank_account_id == bank_account_id,
            BankTransactionModel.is_from_bank.is_(True),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_user(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[BankTransaction]:
        stmt = select(BankTransactionModel).where(
            BankTransactionModel.user_id == user_id,
            BankTransactionModel.is_from_bank.is_(True),
        )

        if start_date:
            stmt = stmt.where(BankTransactionModel.booked_on >= start_date)

        if end_date:
            stmt = stmt.where(BankTransactionModel.booked_on <= end_date)

        stmt = stmt.order_by(
            BankTransactionModel.booked_on.desc(),
            BankTransactionModel.created_at.desc(),
        )

        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    def _to_row(self, transaction: BankTransaction) -> dict[str, Any]:
        return {
            "id": transaction.id,
            "transaction_id": transaction.transaction_id,
            "user_id": transaction.user_id,
            "bank_account_id": transaction.bank_account_id,
            "external_transaction_id": transaction.external_transaction_id,
            "amount": transaction.amount,
            "currency": transaction.currency,
            "description": transaction.description,
            "merchant_name": transaction.merchant_name,
            "category": transaction.category,
            "transaction_type": transaction.transaction_type,
            "booked_on": transaction.booked_on,
            "status": transaction.status,
            "running_balance": transaction.running_balance,
            "extra_data": transaction.extra_data,
            "is_from_bank": transaction.is_from_bank,
            "created_at": transaction.created_at,
        }

    def _map_to_domain(self, model: BankTransactionModel) -> BankTransaction:
        return BankTransaction(
            id=model.id,
            transaction_id=model.transaction_id,
            user_id=model.user_id,
            bank_account_id=model.bank_account_id,
            external_transaction_id=model.external_transaction_id,
            amount=model.amount,
            currency=model.currency,
            description=model.description,
            merchant_name=model.merchant_name,
            category=model.category,
            transaction_type=model.transaction_type,
            booked_on=model.booked_on,
            status=model.status,
            running_balance=model.running_balance,
            extra_data=model.extra_data,
            is_from_bank=model.is_from_bank,
            created_at=ensure_tz_aware(model.created_at),
        )

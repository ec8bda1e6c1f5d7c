"""SQLAlchemy implementation of BankConnectionRepository."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vita.domain.banking.entities import BankConnection
from vita.domain.banking.repositories import BankConnectionRepository
from vita.domain.banking.value_objects import ConnectionStatus
from vita.domain.shared.time import ensure_tz_aware
from vita.infrastructure.persistence.sqlalchemy.models import BankConnectionModel
from vita.infrastructure.persistence.sqlalchemy.repositories._utils import (
    dialect_insert,
)

logger = logging.getLogger(__name__)


class BankConnectionRepositorySQLAlchemy(BankConnectionRepository):
    """SQLAlchemy implementation of bank connection repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def upsert(self, connection: BankConnection) -> BankConnection:
        stmt = dialect_insert(self._session, BankConnectionModel).values(
            id=connection.id,
            user_id=connection.user_id,
            external_connection_id=connection.external_connection_id,
            bank_name=connection.bank_name,
            bank_code=connection.bank_code,
            status=connection.status.value,
            status_message=connection.status_message,
            created_at=connection.created_at,
            last_sync_at=connection.last_sync_at,
            consent_expires_at=connection.consent_expires_at,
        )
        # user_id is never overwritten.
        stmt = stmt.on_conflict_do_update(
            index_elements=[BankConnectionModel.external_connection_id],
            set_={
                "status": stmt.excluded.status,
                "status_message": stmt.excluded.status_message,
                "last_sync_at": stmt.excluded.last_sync_at,
                "consent_expires_at": stmt.excluded.consent_expires_at,
            },
        ).returning(BankConnectionModel)

        result = await self._session.execute(
            stmt,
            execution_options={"populate_existing": True},
        )
        model = result.scalar_one()
        logger.debug(
            "Upserted bank connection %s (status=%s)",
            model.external_connection_id,
            model.status,
        )
        return self._map_to_domain(model)

    async def save(self, connection: BankConnection) -> None:
        model = await self._session.get(BankConnectionModel, connection.id)

        if model:
            self._update_model_from_domain(model, connection)
        else:
            logger.debug(
                "Creating new bank connection: %s",
                connection.external_connection_id,
            )
            self._session.add(self._create_model_from_domain(connection))

        await self._session.flush()

    async def find_by_id(self, connection_id: UUID) -> Optional[BankConnection]:
        model = await self._session.get(BankConnectionModel, connection_id)
        return self._map_to_domain(model) if model else None

    async def find_by_id_for_user(
        self,
        connection_id: UUID,
        user_id: str,
    ) -> Optional[BankConnection]:
        stmt = select(BankConnectionModel).where(
            BankConnectionModel.id == connection_id,
            BankConnectionModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def find_by_external_id(
        self,
        external_connection_id: str,
    ) -> Optional[BankConnection]:
        stmt = select(BankConnectionModel).where(
            BankConnectionModel.external_connection_id == external_connection_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def find_by_user(self, user_id: str) -> list[BankConnection]:
        stmt = (
            select(BankConnectionModel)
            .where(BankConnectionModel.user_id == user_id)
            .order_by(BankConnectionModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    async def find_active_by_user(self, user_id: str) -> list[BankConnection]:
        stmt = (
            select(BankConnectionModel)
            .where(
                BankConnectionModel.user_id == user_id,
                BankConnectionModel.status == ConnectionStatus.ACTIVE.value,
            )
            .order_by(BankConnectionModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._map_to_domain(m) for m in result.scalars().all()]

    def _create_model_from_domain(
        self,
        connection: BankConnection,
    ) -> BankConnectionModel:
        return BankConnectionModel(
            id=connection.id,
            user_id=connection.user_id,
            external_connection_id=connection.external_connection_id,
            bank_name=connection.bank_name,
            bank_code=connection.bank_code,
            status=connection.status.value,
            status_message=connection.status_message,
            created_at=connection.created_at,
            last_sync_at=connection.last_sync_at,
            consent_expires_at=connection.consent_expires_at,
        )

    def _update_model_from_domain(
        self,
        model: BankConnectionModel,
        connection: BankConnection,
    ) -> None:
        model.bank_name = connection.bank_name
        model.bank_code = connection.bank_code
        model.status = connection.status.value
        model.status_message = connection.status_message
        model.last_sync_at = connection.last_sync_at
        model.consent_expires_at = connection.consent_expires_at

    def _map_to_domain(self, model: BankConnectionModel) -> BankConnection:
        return BankConnection(
            id=model.id,
            user_id=model.user_id,
            external_connection_id=model.external_connection_id,
            bank_name=model.bank_name,
            bank_code=model.bank_code,
            status=ConnectionStatus(model.status),
            status_message=model.status_message,
            created_at=ensure_tz_aware(model.created_at),
            last_sync_at=ensure_tz_aware(model.last_sync_at),
            consent_expires_at=ensure_tz_aware(model.consent_expires_at),
        )

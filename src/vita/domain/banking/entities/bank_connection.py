"""Bank connection entity."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from vita.domain.banking.value_objects import AggregatorConnection, ConnectionStatus
from vita.domain.shared.exceptions import ValidationError
from vita.domain.shared.time import utc_now


class BankConnection:
    """
    One user's consent-based link to one financial institution.

    - The external connection id is minted by the aggregator and is unique
      across the store; it is the matching key for callbacks.
    - A connection belongs to exactly one user for its lifetime.
    - Disconnecting is a soft delete (status -> inactive).
    """

    def __init__(  # NOQA: PLR0913
        self,
        user_id: str,
        external_connection_id: str,
        bank_name: str,
        bank_code: str,
        status: ConnectionStatus = ConnectionStatus.PENDING,
        status_message: Optional[str] = None,
        id: Optional[UUID] = None,
        created_at: Optional[datetime] = None,
        last_sync_at: Optional[datetime] = None,
        consent_expires_at: Optional[datetime] = None,
    ):
        if not user_id:
            msg = "Bank connection requires an owning user"
            raise ValidationError(msg)
        if not external_connection_id:
            msg = "Bank connection requires an external connection id"
            raise ValidationError(msg)

        self._id = id if id is not None else uuid4()
        self._user_id = user_id
        self._external_connection_id = external_connection_id
        self._bank_name = bank_name
        self._bank_code = bank_code
        self._status = status
        self._status_message = status_message
        self._created_at = created_at or utc_now()
        self._last_sync_at = last_sync_at
        self._consent_expires_at = consent_expires_at

    @classmethod
    def from_aggregator(
        cls,
        user_id: str,
        remote: AggregatorConnection,
        synced_at: Optional[datetime] = None,
    ) -> BankConnection:
        connection = cls(
            user_id=user_id,
            external_connection_id=remote.id,
            bank_name=remote.provider_name,
            bank_code=remote.provider_code,
        )
        connection.apply_remote_state(remote, synced_at)
        return connection

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def external_connection_id(self) -> str:
        return self._external_connection_id

    @property
    def bank_name(self) -> str:
        return self._bank_name

    @property
    def bank_code(self) -> str:
        return self._bank_code

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def status_message(self) -> Optional[str]:
        return self._status_message

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def last_sync_at(self) -> Optional[datetime]:
        return self._last_sync_at

    @property
    def consent_expires_at(self) -> Optional[datetime]:
        return self._consent_expires_at

    @property
    def is_active(self) -> bool:
        return self._status.is_syncable()

    def apply_remote_state(
        self,
        remote: AggregatorConnection,
        synced_at: Optional[datetime] = None,
    ) -> None:
        """Overwrite lifecycle fields with the aggregator's current view.

        The owning user is never changed.
        """
        self._status = remote.lifecycle_status
        self._status_message = (
            f"Aggregator reported status '{remote.status}'"
            if self._status is ConnectionStatus.ERROR
            else None
        )
        self._consent_expires_at = remote.consent_expires_at
        self._last_sync_at = synced_at or utc_now()

    def mark_synced(self, synced_at: Optional[datetime] = None) -> None:
        self._last_sync_at = synced_at or utc_now()

    def deactivate(self) -> None:
        self._status = ConnectionStatus.INACTIVE
        self._status_message = "Disconnected by user"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BankConnection):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"BankConnection(id={self._id}, "
            f"external_id={self._external_connection_id!r}, "
            f"status={self._status.value!r})"
        )

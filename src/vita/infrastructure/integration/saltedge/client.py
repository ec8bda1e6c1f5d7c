"""HTTP client for the Salt Edge aggregation API."""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Optional, TypeVar
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from vita.domain.banking.exceptions import (
    AggregatorConfigError,
    AggregatorPayloadError,
    UpstreamError,
)
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.value_objects import (
    AggregatorAccount,
    AggregatorConnection,
    AggregatorTransaction,
    ConnectSession,
)
from vita.infrastructure.integration.saltedge.signing import SaltEdgeSigner

if TYPE_CHECKING:
    from vita_config import Settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_BASE_URL = "https://www.saltedge.com/api/v5"


def _connection_path(external_connection_id: str, action: str = "") -> str:
    # One escaped path segment; the signed endpoint must match the wire path.
    path = f"/connections/{quote(external_connection_id, safe='')}"
    return f"{path}/{action}" if action else path


class SaltEdgeClient(AggregatorPort):
    """Signed HTTP client implementing the aggregator port for Salt Edge."""

    def __init__(  # NOQA: PLR0913
        self,
        app_id: str,
        secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        country_code: str = "DK",
        http_client: Optional[httpx.AsyncClient] = None,
        signer: Optional[SaltEdgeSigner] = None,
    ):
        credentials = {"saltedge_app_id": app_id, "saltedge_secret": secret}
        missing = [name for name, value in credentials.items() if not value]
        if missing:
            raise AggregatorConfigError(missing=missing)

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._country_code = country_code
        self._signer = signer or SaltEdgeSigner(app_id=app_id, secret=secret)
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> SaltEdgeClient:
        app_id = settings.saltedge_app_id
        secret = settings.saltedge_secret
        return cls(
            app_id=app_id.get_secret_value() if app_id else "",
            secret=secret.get_secret_value() if secret else "",
            base_url=settings.saltedge_base_url,
            timeout=settings.saltedge_timeout,
            country_code=settings.saltedge_country_code,
            http_client=http_client,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SaltEdgeClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[dict[str, str]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        # The signed string must equal what goes on the wire, so the query
        # and body are serialized here rather than by httpx.
        endpoint = f"{path}?{urlencode(params)}" if params else path
        body = json.dumps(payload).encode("utf-8") if payload is not None else None
        headers = self._signer.headers(method, endpoint, body)

        client = await self._get_client()
        request = client.build_request(
            method,
            endpoint,
            content=body,
            headers=headers,
            timeout=self._timeout,
        )
        try:
            return await client.send(request)
        except httpx.TimeoutException as e:
            logger.error("Salt Edge %s timed out (%s): %s", operation, endpoint, e)
            msg = f"Salt Edge {operation} timed out"
            raise UpstreamError(msg, operation=operation) from e
        except httpx.HTTPError as e:
            logger.error(
                "Salt Edge %s transport error (%s, %s): %s",
                operation,
                endpoint,
                type(e).__name__,
                e,
            )
            msg = f"Salt Edge {operation} failed: {type(e).__name__}"
            raise UpstreamError(msg, operation=operation) from e

    def _ensure_success(self, response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        logger.error(
            "Salt Edge API error during %s: %d - %s",
            operation,
            response.status_code,
            response.text,
        )
        msg = f"Salt Edge API error: {response.status_code}"
        raise UpstreamError(
            msg,
            status_code=response.status_code,
            operation=operation,
            body=response.text,
        )

    def _data(self, response: httpx.Response, operation: str) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Salt Edge {operation} returned a non-JSON body"
            raise AggregatorPayloadError(msg, operation=operation, reason=str(e)) from e
        if not isinstance(payload, dict) or "data" not in payload:
            msg = f"Salt Edge {operation} response has no 'data' member"
            raise AggregatorPayloadError(msg, operation=operation)
        return payload["data"]

    def _parse_one(self, model: type[ModelT], data: Any, operation: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            msg = f"Salt Edge {operation} returned a malformed {model.__name__}"
            raise AggregatorPayloadError(msg, operation=operation, reason=str(e)) from e

    def _parse_many(
        self,
        model: type[ModelT],
        data: Any,
        operation: str,
    ) -> list[ModelT]:
        if not isinstance(data, list):
            msg = f"Salt Edge {operation} returned {type(data).__name__}, not a list"
            raise AggregatorPayloadError(msg, operation=operation)

        parsed: list[ModelT] = []
        for item in data:
            try:
                parsed.append(model.model_validate(item))
            except PydanticValidationError as e:
                record_id = item.get("id") if isinstance(item, dict) else None
                logger.warning(
                    "Skipping malformed %s %s from %s: %s",
                    model.__name__,
                    record_id,
                    operation,
                    e.errors()[0]["msg"] if e.errors() else e,
                )
        return parsed

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create_connect_session(
        self,
        customer_id: str,
        return_url: str,
        provider_codes: Optional[list[str]] = None,
    ) -> ConnectSession:
        operation = "create_connect_session"
        data: dict[str, Any] = {
            "customer_id": customer_id,
            "return_url": return_url,
            "country_code": self._country_code,
        }
        if provider_codes:
            data["provider_codes"] = list(provider_codes)

        response = await self._send(
            "POST",
            "/connect_sessions",
            operation,
            payload={"data": data},
        )
        self._ensure_success(response, operation)
        session = self._parse_one(
            ConnectSession,
            self._data(response, operation),
            operation,
        )
        logger.info("Created connect session for customer %s", customer_id)
        return session

    async def get_connection(
        self,
        external_connection_id: str,
    ) -> Optional[AggregatorConnection]:
        operation = "get_connection"
        response = await self._send(
            "GET",
            _connection_path(external_connection_id),
            operation,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("Salt Edge has no connection %s", external_connection_id)
            return None
        self._ensure_success(response, operation)
        return self._parse_one(
            AggregatorConnection,
            self._data(response, operation),
            operation,
        )

    async def list_connections(self, customer_id: str) -> list[AggregatorConnection]:
        operation = "list_connections"
        response = await self._send(
            "GET",
            "/connections",
            operation,
            params={"customer_id": customer_id},
        )
        self._ensure_success(response, operation)
        return self._parse_many(
            AggregatorConnection,
            self._data(response, operation),
            operation,
        )

    async def get_accounts(
        self,
        external_connection_id: str,
    ) -> list[AggregatorAccount]:
        operation = "get_accounts"
        response = await self._send(
            "GET",
            "/accounts",
            operation,
            params={"connection_id": external_connection_id},
        )
        self._ensure_success(response, operation)
        accounts = self._parse_many(
            AggregatorAccount,
            self._data(response, operation),
            operation,
        )
        logger.debug(
            "Fetched %d accounts for connection %s",
            len(accounts),
            external_connection_id,
        )
        return accounts

    async def get_transactions(
        self,
        external_account_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[AggregatorTransaction]:
        operation = "get_transactions"
        params = {"account_id": external_account_id}
        if from_date is not None:
            params["from_date"] = from_date.isoformat()
        if to_date is not None:
            params["to_date"] = to_date.isoformat()

        response = await self._send("GET", "/transactions", operation, params=params)
        self._ensure_success(response, operation)
        transactions = self._parse_many(
            AggregatorTransaction,
            self._data(response, operation),
            operation,
        )
        logger.debug(
            "Fetched %d transactions for account %s (%s to %s)",
            len(transactions),
            external_account_id,
            from_date,
            to_date,
        )
        return transactions

    async def refresh_connection(self, external_connection_id: str) -> bool:
        operation = "refresh_connection"
        try:
            response = await self._send(
                "PUT",
                _connection_path(external_connection_id, "refresh"),
                operation,
                payload={},
            )
            self._ensure_success(response, operation)
        except UpstreamError as e:
            logger.warning(
                "Could not refresh Salt Edge connection %s: %s",
                external_connection_id,
                e,
            )
            return False
        return True

    async def remove_connection(self, external_connection_id: str) -> bool:
        operation = "remove_connection"
        try:
            response = await self._send(
                "DELETE",
                _connection_path(external_connection_id),
                operation,
            )
            self._ensure_success(response, operation)
        except UpstreamError as e:
            logger.warning(
                "Could not remove Salt Edge connection %s: %s",
                external_connection_id,
                e,
            )
            return False
        logger.info("Removed Salt Edge connection %s", external_connection_id)
        return True

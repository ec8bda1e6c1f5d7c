"""Tests for SaltEdgeClient using httpx.MockTransport."""

import json
from datetime import date
from decimal import Decimal
from urllib.parse import urlencode

import httpx
import pytest

from vita.domain.banking.exceptions import (
    AggregatorConfigError,
    AggregatorPayloadError,
    UpstreamError,
)
from vita.domain.banking.value_objects import ConnectionStatus
from vita.infrastructure.integration.saltedge import SaltEdgeClient
from vita.infrastructure.integration.saltedge.signing import (
    build_string_to_sign,
    sign,
)
from vita_config import Settings

BASE_URL = "https://example.test/api/v5"
APP_ID = "app-123"
SECRET = "test-secret"


class Recorder:
    """Transport handler that records requests and replays canned responses."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path.removeprefix("/api/v5"))
        status, payload = self.routes.get(key, (404, {"error": "not found"}))
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)


def _client(recorder: Recorder) -> SaltEdgeClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(recorder),
        base_url=BASE_URL,
    )
    return SaltEdgeClient(
        app_id=APP_ID,
        secret=SECRET,
        base_url=BASE_URL,
        http_client=http_client,
    )


CONNECTION = {
    "id": "conn_1",
    "customer_id": "user_1",
    "provider_code": "nordea_dk",
    "provider_name": "Nordea",
    "status": "active",
    "consent_expires_at": "2025-06-30T12:00:00Z",
}
CONNECTION_ROUTE = ("GET", "/connections/conn_1")


class TestConfiguration:
    @pytest.mark.parametrize(
        ("app_id", "secret", "missing"),
        [
            ("", SECRET, ["saltedge_app_id"]),
            (APP_ID, "", ["saltedge_secret"]),
            ("", "", ["saltedge_app_id", "saltedge_secret"]),
        ],
    )
    def test_missing_credentials(self, app_id, secret, missing):
        with pytest.raises(AggregatorConfigError) as exc_info:
            SaltEdgeClient(app_id=app_id, secret=secret)
        assert exc_info.value.details == {"missing": missing}

    def test_from_settings_without_credentials(self):
        settings = Settings(saltedge_app_id=None, saltedge_secret=None)

        with pytest.raises(AggregatorConfigError):
            SaltEdgeClient.from_settings(settings)


class TestSigning:
    async def test_every_request_is_signed(self):
        recorder = Recorder({CONNECTION_ROUTE: (200, {"data": CONNECTION})})
        client = _client(recorder)

        await client.get_connection("conn_1")

        request = recorder.requests[0]
        assert request.headers["App-id"] == APP_ID
        expected = sign(
            SECRET,
            build_string_to_sign(
                request.headers["Timestamp"],
                request.headers["Nonce"],
                "GET",
                "/connections/conn_1",
            ),
        )
        assert request.headers["Signature"] == expected

    async def test_query_string_is_part_of_signature(self):
        recorder = Recorder({("GET", "/accounts"): (200, {"data": []})})
        client = _client(recorder)

        await client.get_accounts("conn_1")

        request = recorder.requests[0]
        endpoint = "/accounts?" + urlencode({"connection_id": "conn_1"})
        expected = sign(
            SECRET,
            build_string_to_sign(
                request.headers["Timestamp"],
                request.headers["Nonce"],
                "GET",
                endpoint,
            ),
        )
        assert request.url.params["connection_id"] == "conn_1"
        assert request.headers["Signature"] == expected

    async def test_body_digest_is_part_of_signature(self):
        recorder = Recorder(
            {
                ("POST", "/connect_sessions"): (
                    200,
                    {"data": {"connect_url": "https://connect.example.test/x"}},
                ),
            },
        )
        client = _client(recorder)

        await client.create_connect_session("user_1", "https://app.example.test/cb")

        request = recorder.requests[0]
        expected = sign(
            SECRET,
            build_string_to_sign(
                request.headers["Timestamp"],
                request.headers["Nonce"],
                "POST",
                "/connect_sessions",
                request.content,
            ),
        )
        assert request.headers["Signature"] == expected

    async def test_headers_are_not_shared_between_requests(self):
        recorder = Recorder({CONNECTION_ROUTE: (200, {"data": CONNECTION})})
        client = _client(recorder)

        await client.get_connection("conn_1")
        await client.get_connection("conn_1")

        first, second = recorder.requests
        assert first.headers["Nonce"] != second.headers["Nonce"]

    @pytest.mark.parametrize(
        ("external_id", "escaped"),
        [
            ("conn 1?x=1", "conn%201%3Fx%3D1"),
            ("conn/1", "conn%2F1"),
            ("konto-\u00e4", "konto-%C3%A4"),
        ],
    )
    async def test_connection_id_is_escaped_as_signed(self, external_id, escaped):
        recorder = Recorder({})
        client = _client(recorder)

        await client.get_connection(external_id)

        request = recorder.requests[0]
        endpoint = f"/connections/{escaped}"
        expected = sign(
            SECRET,
            build_string_to_sign(
                request.headers["Timestamp"],
                request.headers["Nonce"],
                "GET",
                endpoint,
            ),
        )
        assert request.url.raw_path == f"/api/v5{endpoint}".encode("ascii")
        assert not request.url.params
        assert request.headers["Signature"] == expected

    async def test_refresh_path_escapes_connection_id(self):
        recorder = Recorder({})
        client = _client(recorder)

        await client.refresh_connection("conn/1")

        request = recorder.requests[0]
        assert request.url.raw_path == b"/api/v5/connections/conn%2F1/refresh"


class TestOperations:
    async def test_create_connect_session_payload(self):
        recorder = Recorder(
            {
                ("POST", "/connect_sessions"): (
                    200,
                    {
                        "data": {
                            "connect_url": "https://connect.example.test/abc",
                            "expires_at": "2024-01-10T10:00:00Z",
                        },
                    },
                ),
            },
        )
        client = _client(recorder)

        session = await client.create_connect_session(
            "user_1",
            "https://app.example.test/cb",
            provider_codes=["nordea_dk", "lunar_dk"],
        )

        assert session.connect_url == "https://connect.example.test/abc"
        body = json.loads(recorder.requests[0].content)
        assert body == {
            "data": {
                "customer_id": "user_1",
                "return_url": "https://app.example.test/cb",
                "country_code": "DK",
                "provider_codes": ["nordea_dk", "lunar_dk"],
            },
        }

    async def test_get_connection(self):
        recorder = Recorder({CONNECTION_ROUTE: (200, {"data": CONNECTION})})
        client = _client(recorder)

        connection = await client.get_connection("conn_1")

        assert connection.id == "conn_1"
        assert connection.provider_name == "Nordea"
        assert connection.lifecycle_status is ConnectionStatus.ACTIVE

    async def test_get_connection_not_found(self):
        client = _client(Recorder({}))

        assert await client.get_connection("missing") is None

    async def test_list_connections(self):
        recorder = Recorder({("GET", "/connections"): (200, {"data": [CONNECTION]})})
        client = _client(recorder)

        connections = await client.list_connections("user_1")

        assert [c.id for c in connections] == ["conn_1"]
        assert recorder.requests[0].url.params["customer_id"] == "user_1"

    async def test_get_accounts_skips_malformed_records(self):
        recorder = Recorder(
            {
                ("GET", "/accounts"): (
                    200,
                    {
                        "data": [
                            {
                                "id": "acc_1",
                                "name": "Checking",
                                "balance": "100.00",
                                "currency_code": "DKK",
                                "extra": {"available_amount": 90.5},
                            },
                            {"id": "acc_2", "name": "No balance"},
                        ],
                    },
                ),
            },
        )
        client = _client(recorder)

        accounts = await client.get_accounts("conn_1")

        assert [a.id for a in accounts] == ["acc_1"]
        assert accounts[0].balance == Decimal("100.00")
        assert accounts[0].available_balance == Decimal("90.5")

    async def test_get_transactions_sends_window(self):
        recorder = Recorder(
            {
                ("GET", "/transactions"): (
                    200,
                    {
                        "data": [
                            {
                                "id": "tx_1",
                                "account_id": "acc_1",
                                "made_on": "2024-01-11",
                                "amount": -12.5,
                                "currency_code": "DKK",
                                "description": "Coffee",
                                "extra": {"merchant": "Espresso House"},
                            },
                        ],
                    },
                ),
            },
        )
        client = _client(recorder)

        transactions = await client.get_transactions(
            "acc_1",
            from_date=date(2024, 1, 9),
            to_date=date(2024, 1, 12),
        )

        params = recorder.requests[0].url.params
        assert params["account_id"] == "acc_1"
        assert params["from_date"] == "2024-01-09"
        assert params["to_date"] == "2024-01-12"
        assert transactions[0].amount == Decimal("-12.5")
        assert transactions[0].merchant == "Espresso House"

    async def test_upstream_error_carries_status(self):
        recorder = Recorder({("GET", "/accounts"): (500, {"error": "boom"})})
        client = _client(recorder)

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_accounts("conn_1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.operation == "get_accounts"

    async def test_missing_data_member_is_payload_error(self):
        recorder = Recorder({("GET", "/accounts"): (200, {"items": []})})
        client = _client(recorder)

        with pytest.raises(AggregatorPayloadError):
            await client.get_accounts("conn_1")

    async def test_non_json_body_is_payload_error(self):
        recorder = Recorder({("GET", "/accounts"): (200, "<html>")})
        client = _client(recorder)

        with pytest.raises(AggregatorPayloadError):
            await client.get_accounts("conn_1")

    async def test_transport_error_is_upstream_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=BASE_URL,
        )
        client = SaltEdgeClient(APP_ID, SECRET, http_client=http_client)

        with pytest.raises(UpstreamError):
            await client.get_accounts("conn_1")

    async def test_refresh_connection(self):
        recorder = Recorder(
            {("PUT", "/connections/conn_1/refresh"): (200, {"data": CONNECTION})},
        )
        client = _client(recorder)

        assert await client.refresh_connection("conn_1") is True
        assert recorder.requests[0].method == "PUT"

    async def test_remove_connection(self):
        recorder = Recorder(
            {("DELETE", "/connections/conn_1"): (200, {"data": {"removed": True}})},
        )
        client = _client(recorder)

        assert await client.remove_connection("conn_1") is True

    async def test_remove_connection_failure_returns_false(self):
        recorder = Recorder({("DELETE", "/connections/conn_1"): (500, {})})
        client = _client(recorder)

        assert await client.remove_connection("conn_1") is False

    async def test_timeout_is_upstream_error(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=BASE_URL,
        )
        client = SaltEdgeClient(APP_ID, SECRET, http_client=http_client)

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_accounts("conn_1")

        assert exc_info.value.operation == "get_accounts"
        assert "timed out" in exc_info.value.message

    async def test_configured_timeout_applies_to_injected_client(self):
        recorder = Recorder({("GET", "/accounts"): (200, {"data": []})})
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(recorder),
            base_url=BASE_URL,
        )
        client = SaltEdgeClient(
            APP_ID,
            SECRET,
            base_url=BASE_URL,
            timeout=5.0,
            http_client=http_client,
        )

        await client.get_accounts("conn_1")

        assert recorder.requests[0].extensions["timeout"]["read"] == 5.0

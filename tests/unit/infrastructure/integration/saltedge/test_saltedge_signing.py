"""Tests for Salt Edge request signing."""

import base64
import hashlib
import hmac

from vita.infrastructure.integration.saltedge.signing import (
    SaltEdgeSigner,
    body_digest,
    build_string_to_sign,
    sign,
)

SECRET = "test-secret"


def _expected_signature(secret: str, message: str) -> str:
    mac = hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()
    return base64.b64encode(mac).decode()


class TestStringToSign:
    def test_without_body_ends_with_empty_segment(self):
        result = build_string_to_sign(
            "1700000000",
            "nonce-1",
            "get",
            "/accounts?connection_id=conn_1",
        )

        assert result == "1700000000|nonce-1|GET|/accounts?connection_id=conn_1|"

    def test_with_body_appends_base64_sha256(self):
        body = b'{"data":{}}'
        digest = base64.b64encode(hashlib.sha256(body).digest()).decode()

        result = build_string_to_sign("1", "n", "POST", "/connect_sessions", body)

        assert result == f"1|n|POST|/connect_sessions|{digest}"
        assert body_digest(body) == digest

    def test_empty_body_has_no_digest(self):
        assert body_digest(b"") == ""
        assert body_digest(None) == ""


class TestSign:
    def test_hmac_sha256_base64(self):
        message = "1|n|GET|/connections/conn_1|"

        assert sign(SECRET, message) == _expected_signature(SECRET, message)


class TestSaltEdgeSigner:
    def test_headers(self):
        signer = SaltEdgeSigner(
            app_id="app-123",
            secret=SECRET,
            clock=lambda: 1700000000.9,
            nonce_factory=lambda: "fixed-nonce",
        )

        headers = signer.headers("GET", "/connections/conn_1")

        expected = _expected_signature(
            SECRET,
            "1700000000|fixed-nonce|GET|/connections/conn_1|",
        )
        assert headers == {
            "App-id": "app-123",
            "Timestamp": "1700000000",
            "Nonce": "fixed-nonce",
            "Signature": expected,
        }

    def test_fresh_nonce_per_request(self):
        signer = SaltEdgeSigner(app_id="app-123", secret=SECRET)

        first = signer.headers("GET", "/accounts")
        second = signer.headers("GET", "/accounts")

        assert first["Nonce"] != second["Nonce"]
        assert first["Signature"] != second["Signature"]

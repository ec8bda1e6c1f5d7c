"""Request signing for the Salt Edge API.

Every request carries ``App-id``, ``Timestamp``, ``Nonce`` and ``Signature``
headers. The signature is ``base64(HMAC-SHA256(secret, string_to_sign))``
where the string to sign is::

    {timestamp}|{nonce}|{METHOD}|{path+query}|{base64(sha256(body))}

and the last segment is empty when the request has no body. Timestamp and
nonce are single-use values, so headers are built per request and never
stored on a shared client.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
import uuid
from typing import Callable, Optional


def body_digest(body: Optional[bytes]) -> str:
    if not body:
        return ""
    return base64.b64encode(hashlib.sha256(body).digest()).decode("ascii")


def build_string_to_sign(
    timestamp: str,
    nonce: str,
    method: str,
    endpoint: str,
    body: Optional[bytes] = None,
) -> str:
    return f"{timestamp}|{nonce}|{method.upper()}|{endpoint}|{body_digest(body)}"


def sign(secret: str, string_to_sign: str) -> str:
    mac = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    )
    return base64.b64encode(mac.digest()).decode("ascii")


class SaltEdgeSigner:
    """Builds a fresh set of authentication headers for each request."""

    def __init__(
        self,
        app_id: str,
        secret: str,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._app_id = app_id
        self._secret = secret
        self._clock = clock
        self._nonce_factory = nonce_factory

    def headers(
        self,
        method: str,
        endpoint: str,
        body: Optional[bytes] = None,
    ) -> dict[str, str]:
        """
        Sign one request.

        Parameters
        ----------
        method
            HTTP method, any case
        endpoint
            Path relative to the API base URL, including the query string,
            exactly as it is sent
        body
            Raw request body, if any

        Returns
        -------
        Headers to attach to this request only
        """
        timestamp = str(int(self._clock()))
        nonce = self._nonce_factory()
        string_to_sign = build_string_to_sign(timestamp, nonce, method, endpoint, body)
        return {
            "App-id": self._app_id,
            "Timestamp": timestamp,
            "Nonce": nonce,
            "Signature": sign(self._secret, string_to_sign),
        }

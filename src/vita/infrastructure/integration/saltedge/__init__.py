"""Salt Edge open-banking aggregator integration."""

from vita.infrastructure.integration.saltedge.client import SaltEdgeClient
from vita.infrastructure.integration.saltedge.signing import (
    SaltEdgeSigner,
    build_string_to_sign,
    sign,
)

__all__ = [
    "SaltEdgeClient",
    "SaltEdgeSigner",
    "build_string_to_sign",
    "sign",
]

"""Pytest configuration and shared fixtures"""

import base64
import copy
import json
from typing import Any

import pytest

from kraken_probe.config.schemas import Credentials

# RFC 6238 reference secret "12345678901234567890"
RFC6238_SEED = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

PRIVATE_KEY = base64.b64encode(b"probe-test-secret-" * 4).decode("ascii")

VALID_TICKER_ENTRY: dict[str, Any] = {
    "a": ["30000.10000", "1", "1.000"],
    "b": ["29999.90000", "2", "2.000"],
    "c": ["30000.00000", "0.01000000"],
    "v": ["100.50000000", "2000.10000000"],
    "p": ["30010.20000", "30050.30000"],
    "t": [5, 10],
    "l": ["29000.00000", "28900.00000"],
    "h": ["31000.00000", "31100.00000"],
    "o": "29500.00000",
}


@pytest.fixture
def ticker_entry() -> dict[str, Any]:
    """A fresh copy of a ticker entry that passes every check"""
    return copy.deepcopy(VALID_TICKER_ENTRY)


@pytest.fixture
def make_body():
    """Serialize an envelope the way the server does"""

    def _make(result: Any = None, error: list[Any] | None = None, **extra: Any) -> bytes:
        envelope: dict[str, Any] = {"error": error or []}
        if result is not None:
            envelope["result"] = result
        envelope.update(extra)
        return json.dumps(envelope).encode("utf-8")

    return _make


@pytest.fixture
def static_otp_credentials() -> Credentials:
    return Credentials(api_public_key="public-key", api_private_key=PRIVATE_KEY, otp="424242")


@pytest.fixture
def totp_credentials() -> Credentials:
    return Credentials(
        api_public_key="public-key", api_private_key=PRIVATE_KEY, otp_seed=RFC6238_SEED
    )

"""
Tests for the command line entry point.
"""

import base64
import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from kraken_probe import main as main_module
from kraken_probe.api.auth import SignedRequest
from kraken_probe.api.client import ApiResponse
from kraken_probe.main import main, parse_args

TIME_BODY = json.dumps(
    {"error": [], "result": {"unixtime": 1618690640, "rfc1123": "Sat, 17 Apr 2021 20:17:20 GMT"}}
).encode()
ORDERS_BODY = json.dumps({"error": [], "result": {"open": {}}}).encode()


class FakeClient:
    """Stands in for KrakenRestClient; answers by url path"""

    sent: list[SignedRequest] = []
    bodies: dict[str, bytes] = {}

    async def __aenter__(self) -> "FakeClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass

    async def send(self, request: SignedRequest) -> ApiResponse:
        FakeClient.sent.append(request)
        for path, body in FakeClient.bodies.items():
            if request.url.endswith(path):
                return ApiResponse(url=request.url, status=200, body=body)
        return ApiResponse(url=request.url, status=404, body=b"")


@pytest.fixture(autouse=True)
def fake_client(monkeypatch):
    FakeClient.sent = []
    FakeClient.bodies = {"/0/public/Time": TIME_BODY, "/0/private/OpenOrders": ORDERS_BODY}
    monkeypatch.setattr(main_module, "KrakenRestClient", FakeClient)
    monkeypatch.setattr(main_module, "setup_logging", MagicMock())
    for name in ("API_Public_Key", "API_Private_Key", "OTP", "OTP_Setup_Key", "API_DOMAIN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return FakeClient


@pytest.fixture
def public_features(tmp_path: Path) -> Path:
    (tmp_path / "public.yaml").write_text(
        "feature: Public API\n"
        "scenarios:\n"
        "  - name: Server time\n"
        "    url: /0/public/Time\n"
        "    check: time\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def private_features(public_features: Path) -> Path:
    (public_features / "private.yaml").write_text(
        "feature: Private API\n"
        "scenarios:\n"
        "  - name: Open orders\n"
        "    access: private\n"
        "    url: /0/private/OpenOrders\n"
        "    check: orders\n",
        encoding="utf-8",
    )
    return public_features


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.features == Path("features")
        assert args.domain is None
        assert args.log_level is None
        assert args.json_logs is False

    def test_flags(self):
        args = parse_args(["--features", "suite", "--domain", "http://localhost", "--log-level", "DEBUG"])
        assert args.features == Path("suite")
        assert args.domain == "http://localhost"
        assert args.log_level == "DEBUG"


class TestMain:
    def test_public_suite_passes(self, public_features, capsys):
        assert main(["--features", str(public_features)]) == 0
        assert "Ran 1 scenarios successfully!" in capsys.readouterr().out
        assert FakeClient.sent[0].method == "GET"

    def test_failing_scenario_exits_with_one(self, public_features, capsys):
        FakeClient.bodies["/0/public/Time"] = json.dumps({"error": ["EService:Unavailable"]}).encode()
        assert main(["--features", str(public_features)]) == 1
        assert "Test failed!" in capsys.readouterr().out

    def test_private_suite_needs_credentials(self, private_features, capsys):
        assert main(["--features", str(private_features)]) == 1
        assert "API_Public_Key" in capsys.readouterr().err
        assert FakeClient.sent == []

    def test_private_suite_with_credentials(self, private_features, monkeypatch):
        monkeypatch.setenv("API_Public_Key", "public-key")
        monkeypatch.setenv("API_Private_Key", base64.b64encode(b"secret").decode())
        monkeypatch.setenv("OTP_Setup_Key", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ")

        assert main(["--features", str(private_features)]) == 0

        private = [request for request in FakeClient.sent if request.method == "POST"]
        assert len(private) == 1
        assert private[0].headers["API-Key"] == "public-key"
        assert "otp=" in private[0].body

    def test_domain_override(self, public_features):
        assert main(["--features", str(public_features), "--domain", "http://localhost:8080"]) == 0
        assert FakeClient.sent[0].url == "http://localhost:8080/0/public/Time"

    def test_missing_feature_directory(self, tmp_path, capsys):
        assert main(["--features", str(tmp_path / "missing")]) == 1
        assert "Setup failed" in capsys.readouterr().err

    def test_logging_is_configured_from_flags(self, public_features, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert main(["--features", str(public_features), "--json-logs"]) == 0
        main_module.setup_logging.assert_called_once_with(
            log_level="WARNING", log_dir=None, json_logs=True
        )

"""
Tests for credential and settings loading.
"""

import base64

import pytest
from pydantic import ValidationError

from kraken_probe.api.exceptions import ConfigurationError
from kraken_probe.config import Credentials, ProbeSettings, load_credentials, load_settings

PRIVATE_KEY = base64.b64encode(b"probe-test-secret").decode("ascii")
SEED = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def environ():
    return {
        "API_Public_Key": "public-key",
        "API_Private_Key": PRIVATE_KEY,
        "OTP": "123456",
    }


class TestCredentials:
    def test_static_otp(self):
        credentials = Credentials(api_public_key="k", api_private_key=PRIVATE_KEY, otp="1")
        assert credentials.otp == "1"
        assert credentials.otp_seed is None

    def test_seed_without_padding(self):
        credentials = Credentials(api_public_key="k", api_private_key=PRIVATE_KEY, otp_seed="MZXW6")
        assert credentials.otp_seed == "MZXW6"

    def test_requires_two_factor(self):
        with pytest.raises(ValidationError, match="either otp or otp_seed"):
            Credentials(api_public_key="k", api_private_key=PRIVATE_KEY)

    def test_invalid_private_key(self):
        with pytest.raises(ValidationError, match="not valid base64"):
            Credentials(api_public_key="k", api_private_key="###", otp="1")

    def test_invalid_seed(self):
        with pytest.raises(ValidationError, match="not valid base32"):
            Credentials(api_public_key="k", api_private_key=PRIVATE_KEY, otp_seed="189!")

    def test_frozen(self):
        credentials = Credentials(api_public_key="k", api_private_key=PRIVATE_KEY, otp="1")
        with pytest.raises(ValidationError):
            credentials.otp = "2"

    def test_secrets_hidden_from_repr(self):
        credentials = Credentials(api_public_key="k", api_private_key=PRIVATE_KEY, otp="987654")
        assert PRIVATE_KEY not in repr(credentials)
        assert "987654" not in repr(credentials)


class TestLoadCredentials:
    def test_static_otp(self, environ):
        credentials = load_credentials(environ)
        assert credentials.api_public_key == "public-key"
        assert credentials.api_private_key == PRIVATE_KEY
        assert credentials.otp == "123456"

    def test_totp_seed(self, environ):
        del environ["OTP"]
        environ["OTP_Setup_Key"] = SEED
        credentials = load_credentials(environ)
        assert credentials.otp is None
        assert credentials.otp_seed == SEED

    @pytest.mark.parametrize("name", ["API_Public_Key", "API_Private_Key"])
    def test_missing_key(self, environ, name):
        del environ[name]
        with pytest.raises(ConfigurationError, match=name):
            load_credentials(environ)

    def test_missing_two_factor(self, environ):
        del environ["OTP"]
        with pytest.raises(ConfigurationError, match="OTP or OTP_Setup_Key"):
            load_credentials(environ)

    def test_empty_value_counts_as_missing(self, environ):
        environ["API_Public_Key"] = ""
        with pytest.raises(ConfigurationError, match="API_Public_Key"):
            load_credentials(environ)

    def test_invalid_key_material(self, environ):
        environ["API_Private_Key"] = "not base64!"
        with pytest.raises(ConfigurationError, match="Invalid credentials"):
            load_credentials(environ)

    def test_reads_process_environment(self, environ, monkeypatch):
        for name, value in environ.items():
            monkeypatch.setenv(name, value)
        monkeypatch.delenv("OTP_Setup_Key", raising=False)
        assert load_credentials().api_public_key == "public-key"


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings == ProbeSettings()
        assert settings.api_domain == "https://api.kraken.com"
        assert settings.user_agent == "Kraken REST API"
        assert settings.log_level == "INFO"

    def test_environment(self):
        settings = load_settings({"API_DOMAIN": "http://localhost:8080/", "LOG_LEVEL": "debug"})
        assert settings.api_domain == "http://localhost:8080"
        assert settings.log_level == "DEBUG"

    def test_overrides_win(self):
        settings = load_settings({"LOG_LEVEL": "DEBUG"}, log_level="ERROR", json_logs=True)
        assert settings.log_level == "ERROR"
        assert settings.json_logs is True

    def test_none_overrides_are_ignored(self):
        settings = load_settings({"LOG_LEVEL": "WARNING"}, log_level=None, api_domain=None)
        assert settings.log_level == "WARNING"

    @pytest.mark.parametrize(
        "overrides",
        [{"api_domain": "api.kraken.com"}, {"log_level": "LOUD"}],
    )
    def test_invalid(self, overrides):
        with pytest.raises(ConfigurationError):
            load_settings({}, **overrides)

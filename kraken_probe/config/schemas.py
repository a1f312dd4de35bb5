"""
Pydantic schemas for probe configuration.
Credentials are validated once, when they are loaded.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kraken_probe.api.auth import API_DOMAIN, USER_AGENT, decode_base32_seed, decode_private_key
from kraken_probe.api.exceptions import DecodeError


class Credentials(BaseModel):
    """API credentials for private endpoints"""

    model_config = ConfigDict(frozen=True)

    api_public_key: str = Field(..., min_length=1, description="API key sent in API-Key")
    api_private_key: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Base64 encoded API secret",
    )
    otp: str | None = Field(
        default=None,
        repr=False,
        description="Static two-factor password",
    )
    otp_seed: str | None = Field(
        default=None,
        repr=False,
        description="Base32 encoded TOTP seed",
    )

    @field_validator("api_private_key")
    @classmethod
    def validate_private_key(cls, value: str) -> str:
        try:
            decode_private_key(value)
        except DecodeError as e:
            raise ValueError(str(e)) from e
        return value

    @field_validator("otp_seed")
    @classmethod
    def validate_otp_seed(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            decode_base32_seed(value)
        except DecodeError as e:
            raise ValueError(str(e)) from e
        return value

    @model_validator(mode="after")
    def validate_two_factor(self) -> "Credentials":
        """Private endpoints need either a static password or a TOTP seed"""
        if not self.otp and not self.otp_seed:
            raise ValueError("either otp or otp_seed must be provided")
        return self


class ProbeSettings(BaseModel):
    """Run-wide settings"""

    api_domain: str = Field(
        default=API_DOMAIN,
        pattern="^https?://",
        description="Scheme and host every url path is appended to",
    )
    user_agent: str = Field(default=USER_AGENT, description="User-Agent header")
    log_level: str = Field(
        default="INFO",
        description="Logging level",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(default=False, description="Use JSON format for logs")

    @field_validator("api_domain")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

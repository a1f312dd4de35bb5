"""
Pydantic schemas for scenario (feature) files.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from kraken_probe.validation.validator import PayloadKind


class Access(str, Enum):
    """Endpoint access level"""

    PUBLIC = "public"
    PRIVATE = "private"


class Scenario(BaseModel):
    """One request against one endpoint plus the checks on its response"""

    name: str = Field(..., min_length=1, description="Scenario name")
    access: Access = Field(default=Access.PUBLIC, description="public or private endpoint")
    url: str = Field(..., description="Endpoint path (e.g., '/0/public/Time')")
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra endpoint parameters (query for public, form for private)",
    )
    expect_status: str = Field(default="ok", description="Expected response status")
    check: PayloadKind | None = Field(default=None, description="Payload format to validate")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("url must be a path starting with '/'")
        return value

    @field_validator("expect_status")
    @classmethod
    def validate_status(cls, value: str) -> str:
        # Only success is checked by this suite
        if value.lower() != "ok":
            raise ValueError(f"unsupported expected status: {value!r}")
        return value.lower()

    @property
    def is_private(self) -> bool:
        return self.access == Access.PRIVATE


class Feature(BaseModel):
    """A named group of scenarios, one per YAML file"""

    feature: str = Field(..., min_length=1, description="Feature name")
    description: str | None = Field(default=None, description="Free-form description")
    scenarios: list[Scenario] = Field(..., min_length=1)

    @property
    def needs_credentials(self) -> bool:
        return any(scenario.is_private for scenario in self.scenarios)

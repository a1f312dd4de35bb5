"""
Loading of credentials and settings from the process environment.
"""

import os
from collections.abc import Mapping

from pydantic import ValidationError

from kraken_probe.api.exceptions import ConfigurationError
from kraken_probe.config.schemas import Credentials, ProbeSettings
from kraken_probe.utils.logger import get_logger

logger = get_logger(__name__)

ENV_PUBLIC_KEY = "API_Public_Key"
ENV_PRIVATE_KEY = "API_Private_Key"
ENV_OTP = "OTP"
ENV_OTP_SEED = "OTP_Setup_Key"


def load_credentials(environ: Mapping[str, str] | None = None) -> Credentials:
    """
    Read and validate API credentials.

    Args:
        environ: Variable source, defaults to os.environ

    Returns:
        Validated Credentials

    Raises:
        ConfigurationError: If a required variable is missing or malformed
    """
    env = os.environ if environ is None else environ

    missing = [name for name in (ENV_PUBLIC_KEY, ENV_PRIVATE_KEY) if not env.get(name)]
    if not env.get(ENV_OTP) and not env.get(ENV_OTP_SEED):
        missing.append(f"{ENV_OTP} or {ENV_OTP_SEED}")
    if missing:
        logger.error("missing_credentials", missing=missing)
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    try:
        credentials = Credentials(
            api_public_key=env[ENV_PUBLIC_KEY],
            api_private_key=env[ENV_PRIVATE_KEY],
            otp=env.get(ENV_OTP) or None,
            otp_seed=env.get(ENV_OTP_SEED) or None,
        )
    except ValidationError as e:
        logger.error("invalid_credentials", error=str(e))
        raise ConfigurationError(f"Invalid credentials: {e}") from e

    logger.info(
        "credentials_loaded",
        api_key=credentials.api_public_key[:4] + "...",
        totp=credentials.otp_seed is not None,
    )
    return credentials


def load_settings(environ: Mapping[str, str] | None = None, **overrides: object) -> ProbeSettings:
    """
    Build run settings from environment defaults and explicit overrides.

    Explicit overrides set to None are ignored, so CLI flags that were not
    given fall back to the environment.
    """
    env = os.environ if environ is None else environ

    values: dict[str, object] = {}
    if env.get("API_DOMAIN"):
        values["api_domain"] = env["API_DOMAIN"]
    if env.get("LOG_LEVEL"):
        values["log_level"] = env["LOG_LEVEL"].upper()
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ProbeSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

"""Configuration management modules"""

from kraken_probe.config.manager import load_credentials, load_settings
from kraken_probe.config.schemas import Credentials, ProbeSettings

__all__ = [
    "load_credentials",
    "load_settings",
    "Credentials",
    "ProbeSettings",
]

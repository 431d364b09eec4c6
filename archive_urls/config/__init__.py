"""Configuration package exports."""

from .loader import CONFIG_ENV_VAR, ConfigLocator, ConfigRepository
from .models import (
    DEFAULT_SOURCES,
    ConfigurationError,
    HarvestSettings,
    SourceName,
    resolve_sources,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigLocator",
    "ConfigRepository",
    "ConfigurationError",
    "DEFAULT_SOURCES",
    "HarvestSettings",
    "SourceName",
    "resolve_sources",
]

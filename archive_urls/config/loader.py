"""Configuration loading helpers for archive-urls."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .models import ConfigurationError, HarvestSettings

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_ENV_VAR = "ARCHIVE_URLS_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/archive-urls/config.yaml")


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the optional settings file.

    Precedence: explicit path, then ``ARCHIVE_URLS_CONFIG``, then the per-user
    default. Only an explicitly requested file is required to exist.
    """

    explicit_path: Path | None = None

    def config_path(self) -> Path | None:
        if self.explicit_path is not None:
            return Path(self.explicit_path).expanduser()
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        default = DEFAULT_CONFIG_PATH.expanduser()
        return default if default.exists() else None


class ConfigRepository:
    """Load settings files and merge command-line overrides."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()

    def load_payload(self) -> dict[str, Any]:
        path = self.locator.config_path()
        if path is None:
            return {}
        if path.suffix not in CONFIG_EXTENSIONS:
            raise ConfigurationError(f"Unsupported configuration file type: {path}")
        try:
            return _read_file(path)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Configuration file not found: {path}") from exc
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to read configuration {path}: {exc}") from exc

    def load_settings(self, overrides: Mapping[str, Any] | None = None) -> HarvestSettings:
        payload = self.load_payload()
        for key, value in (overrides or {}).items():
            if value is not None:
                payload[key] = value
        try:
            return HarvestSettings.model_validate(payload)
        except ValidationError as exc:
            messages = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigurationError(messages) from exc


__all__ = ["ConfigLocator", "ConfigRepository", "CONFIG_ENV_VAR", "CONFIG_EXTENSIONS"]

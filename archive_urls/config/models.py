"""Pydantic models describing a harvest run."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator, model_validator


class ConfigurationError(ValueError):
    """Raised for settings problems that must abort the run before fetching."""


class SourceName(str, Enum):
    """Catalog of archive sources that can be queried."""

    WAYBACK = "wayback"
    COMMONCRAWL = "commoncrawl"
    VIRUSTOTAL = "virustotal"


DEFAULT_SOURCES = ",".join(source.value for source in SourceName)


def _split_names(names: str | Iterable[Any]) -> list[str]:
    if isinstance(names, str):
        return [part.strip() for part in names.split(",")]
    result: list[str] = []
    for name in names:
        value = name.value if isinstance(name, SourceName) else str(name)
        result.append(value.strip())
    return result


def resolve_sources(names: str | Iterable[Any]) -> list[SourceName]:
    """Resolve requested names against the catalog.

    Unknown names are ignored and the result follows catalog order. An empty
    result is a configuration error.
    """

    requested = {name.lower() for name in _split_names(names) if name}
    resolved = [source for source in SourceName if source.value in requested]
    if not resolved:
        choices = ", ".join(source.value for source in SourceName)
        raise ConfigurationError(
            f"no valid sources specified. Please choose from: {choices}"
        )
    return resolved


class HarvestSettings(BaseModel):
    """Options shared by the CLI, orchestrator and sources."""

    show_dates: bool = False
    exclude_subdomains: bool = False
    get_versions: bool = False
    sources: list[SourceName] = Field(default_factory=lambda: list(SourceName))
    output: Path | None = None
    concurrency: int = 5
    timeout: float = 10.0
    virustotal_api_key: str | None = Field(default=None, repr=False)
    commoncrawl_index: str = "CC-MAIN-2018-22"
    user_agent: str | None = None
    log_dir: Path | None = None

    @model_validator(mode="before")
    @classmethod
    def _ignore_sources_for_versions(cls, data: Any) -> Any:
        # version listing only queries the Wayback index
        if isinstance(data, dict) and data.get("get_versions"):
            return {key: value for key, value in data.items() if key != "sources"}
        return data

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value: Any) -> list[SourceName]:
        if value is None:
            return list(SourceName)
        return resolve_sources(value)

    @field_validator("concurrency")
    @classmethod
    def _positive_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("concurrency must be a positive integer")
        return value

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be greater than 0 seconds")
        return value

    @field_validator("virustotal_api_key", "user_agent", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("output", "log_dir", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value).expanduser()


__all__ = [
    "ConfigurationError",
    "DEFAULT_SOURCES",
    "HarvestSettings",
    "SourceName",
    "resolve_sources",
]

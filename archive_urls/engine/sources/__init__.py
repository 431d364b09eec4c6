"""Archive source SPI and implementations."""

from __future__ import annotations

from typing import Iterable

from ...config import ConfigurationError, HarvestSettings, SourceName
from ..fetcher import Fetcher
from .base import BaseSource, SourceError
from .commoncrawl import CommonCrawlSource
from .virustotal import VirusTotalSource
from .wayback import WaybackSource

SOURCE_CATALOG: dict[SourceName, type[BaseSource]] = {
    SourceName.WAYBACK: WaybackSource,
    SourceName.COMMONCRAWL: CommonCrawlSource,
    SourceName.VIRUSTOTAL: VirusTotalSource,
}


def build_sources(
    names: Iterable[SourceName],
    fetcher: Fetcher,
    settings: HarvestSettings | None = None,
) -> list[BaseSource]:
    """Instantiate the requested sources in catalog order."""

    requested = set(names)
    sources = [
        SOURCE_CATALOG[name](fetcher, settings)
        for name in SOURCE_CATALOG
        if name in requested
    ]
    if not sources:
        raise ConfigurationError("no valid sources specified")
    return sources


__all__ = [
    "BaseSource",
    "CommonCrawlSource",
    "SOURCE_CATALOG",
    "SourceError",
    "VirusTotalSource",
    "WaybackSource",
    "build_sources",
]

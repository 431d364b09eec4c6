"""Engine components orchestrating fetch → dispatch → dedup → format → export."""

from .dedup import DeduplicationResult, DeduplicationStore
from .dispatcher import DispatchStats, Dispatcher, is_subdomain
from .fetcher import FetchError, FetchRequest, FetchResponse, Fetcher
from .formatter import OutputFormatter, PLACEHOLDER_DATE, parse_archive_timestamp
from .record import Record
from .sources import SOURCE_CATALOG, BaseSource, SourceError, build_sources
from .thread_pool import ConcurrencyBudget, ThreadPoolManager
from .versions import VersionLister, snapshot_url

__all__ = [
    "BaseSource",
    "ConcurrencyBudget",
    "DeduplicationResult",
    "DeduplicationStore",
    "DispatchStats",
    "Dispatcher",
    "FetchError",
    "FetchRequest",
    "FetchResponse",
    "Fetcher",
    "OutputFormatter",
    "PLACEHOLDER_DATE",
    "Record",
    "SOURCE_CATALOG",
    "SourceError",
    "ThreadPoolManager",
    "VersionLister",
    "build_sources",
    "is_subdomain",
    "parse_archive_timestamp",
    "snapshot_url",
]

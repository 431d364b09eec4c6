"""List the distinct archived versions of individual URLs."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Iterable, Iterator

import structlog

from .dedup import DeduplicationStore
from .fetcher import FetchError, FetchRequest, Fetcher
from .sources import SourceError
from .sources.wayback import CDX_API_URL, decode_cdx_rows
from .thread_pool import ThreadPoolManager

SNAPSHOT_URL_TEMPLATE = "https://web.archive.org/web/{timestamp}if_/{original}"

# CDX fields: urlkey, timestamp, original, mimetype, statuscode, digest, length
_TIMESTAMP_FIELD = 1
_ORIGINAL_FIELD = 2
_DIGEST_FIELD = 5


def snapshot_url(timestamp: str, original: str) -> str:
    return SNAPSHOT_URL_TEMPLATE.format(timestamp=timestamp, original=original)


class VersionLister:
    """Query every capture of one exact URL and keep one per content digest."""

    def __init__(
        self,
        fetcher: Fetcher,
        thread_pool: ThreadPoolManager | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.thread_pool = thread_pool
        self.logger = logger or structlog.get_logger("archive_urls.versions")

    def list_versions(self, url: str) -> list[str]:
        request = FetchRequest(url=CDX_API_URL, params={"url": url, "output": "json"})
        try:
            with self._slot():
                response = self.fetcher.fetch(request)
        except FetchError as exc:
            raise SourceError(f"wayback: {exc}") from exc
        store = DeduplicationStore(enable_url=False, enable_content=True)
        versions: list[str] = []
        for row in decode_cdx_rows(response.text):
            if not isinstance(row, list) or len(row) <= _DIGEST_FIELD:
                continue
            if store.check_and_store(row[_ORIGINAL_FIELD], digest=str(row[_DIGEST_FIELD])).is_duplicate:
                continue
            versions.append(snapshot_url(row[_TIMESTAMP_FIELD], row[_ORIGINAL_FIELD]))
        return versions

    def iter_versions(self, urls: Iterable[str]) -> Iterator[tuple[str, list[str] | None]]:
        """Yield ``(url, versions)`` in input order; ``versions`` is None on failure.

        URLs are fetched concurrently under the shared budget when a thread
        pool is configured; results stay grouped per URL.
        """

        if self.thread_pool is None:
            results = map(self._safe_list, urls)
        else:
            results = self.thread_pool.get().map(self._safe_list, urls)
        yield from results

    def _slot(self) -> AbstractContextManager:
        if self.thread_pool is None:
            return nullcontext()
        return self.thread_pool.budget.slot()

    def _safe_list(self, url: str) -> tuple[str, list[str] | None]:
        try:
            return url, self.list_versions(url)
        except SourceError as exc:
            self.logger.debug("versions_failed", url=url, error=str(exc))
            return url, None


__all__ = ["SNAPSHOT_URL_TEMPLATE", "VersionLister", "snapshot_url"]

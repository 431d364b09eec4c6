"""In-memory deduplication scoped to one target or one version listing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .record import Record


@dataclass
class DeduplicationResult:
    url_duplicate: bool
    content_duplicate: bool

    @property
    def is_duplicate(self) -> bool:
        return self.url_duplicate or self.content_duplicate


class DeduplicationStore:
    """Remember URLs and content digests already emitted; first seen wins.

    A store is owned by the single consumer of a stream and is discarded with
    it, so no locking is needed.
    """

    def __init__(self, enable_url: bool = True, enable_content: bool = False) -> None:
        self.enable_url = enable_url
        self.enable_content = enable_content
        self._urls: set[str] = set()
        self._digests: set[str] = set()
        self.duplicates = 0

    def check_and_store(self, url: str, digest: str | None = None) -> DeduplicationResult:
        url_dup = self.enable_url and url in self._urls
        content_dup = self.enable_content and digest is not None and digest in self._digests
        if url_dup or content_dup:
            self.duplicates += 1
        else:
            if self.enable_url:
                self._urls.add(url)
            if self.enable_content and digest is not None:
                self._digests.add(digest)
        return DeduplicationResult(url_dup, content_dup)

    def unique(self, records: Iterable[Record]) -> Iterator[Record]:
        for record in records:
            if not self.check_and_store(record.url).is_duplicate:
                yield record

    def __len__(self) -> int:
        return len(self._urls) if self.enable_url else len(self._digests)


__all__ = ["DeduplicationResult", "DeduplicationStore"]

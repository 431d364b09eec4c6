"""Common Crawl URL index source."""

from __future__ import annotations

import json

from ...config import SourceName
from ..fetcher import FetchRequest
from ..record import Record
from .base import BaseSource

INDEX_BASE_URL = "http://index.commoncrawl.org"


class CommonCrawlSource(BaseSource):
    """Query one Common Crawl collection; the response is NDJSON."""

    name = SourceName.COMMONCRAWL

    @property
    def index_url(self) -> str:
        return f"{INDEX_BASE_URL}/{self.settings.commoncrawl_index}-index"

    def build_request(self, target: str, exclude_subdomains: bool) -> FetchRequest:
        return FetchRequest(
            url=self.index_url,
            params={
                "url": f"{self.query_target(target, exclude_subdomains)}/*",
                "output": "json",
            },
        )

    def parse(self, text: str) -> list[Record]:
        records: list[Record] = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                item = json.loads(line)
            except ValueError:
                continue
            if not isinstance(item, dict):
                continue
            url = item.get("url")
            if not isinstance(url, str) or not url:
                continue
            timestamp = item.get("timestamp") or ""
            records.append(Record(timestamp=str(timestamp), url=url))
        return records


__all__ = ["CommonCrawlSource", "INDEX_BASE_URL"]

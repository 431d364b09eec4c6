"""Wayback Machine CDX index source."""

from __future__ import annotations

import json
from typing import Any

from ...config import SourceName
from ..fetcher import FetchRequest
from ..record import Record
from .base import BaseSource, SourceError

CDX_API_URL = "http://web.archive.org/cdx/search/cdx"


def decode_cdx_rows(text: str) -> list[Any]:
    """Decode a CDX ``output=json`` body and drop its header row.

    The first row holds field names and is discarded without inspection. An
    empty body means no captures.
    """

    if not text.strip():
        return []
    try:
        rows = json.loads(text)
    except ValueError as exc:
        raise SourceError(f"invalid CDX response: {exc}") from exc
    if not isinstance(rows, list):
        raise SourceError("invalid CDX response: expected a JSON array")
    return rows[1:]


class WaybackSource(BaseSource):
    """Query web.archive.org for every captured URL under a domain."""

    name = SourceName.WAYBACK

    def build_request(self, target: str, exclude_subdomains: bool) -> FetchRequest:
        return FetchRequest(
            url=CDX_API_URL,
            params={
                "url": f"{self.query_target(target, exclude_subdomains)}/*",
                "output": "json",
                "collapse": "urlkey",
            },
        )

    def parse(self, text: str) -> list[Record]:
        records: list[Record] = []
        for row in decode_cdx_rows(text):
            # fields: urlkey, timestamp, original, ...
            if not isinstance(row, list) or len(row) < 3:
                continue
            url = row[2]
            if not isinstance(url, str) or not url:
                continue
            timestamp = row[1] if isinstance(row[1], str) else str(row[1])
            records.append(Record(timestamp=timestamp, url=url))
        return records


__all__ = ["CDX_API_URL", "WaybackSource", "decode_cdx_rows"]

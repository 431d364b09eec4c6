"""VirusTotal domain report source."""

from __future__ import annotations

import json

from ...config import SourceName
from ..fetcher import FetchRequest
from ..record import Record
from .base import BaseSource, SourceError

REPORT_URL = "https://www.virustotal.com/vtapi/v2/domain/report"


class VirusTotalSource(BaseSource):
    """Read ``detected_urls`` from a domain report.

    Without an API key the source is disabled: it makes no request and
    contributes no records. The report is per domain, so the subdomain flag
    does not change the query.
    """

    name = SourceName.VIRUSTOTAL

    @property
    def api_key(self) -> str | None:
        return self.settings.virustotal_api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def build_request(self, target: str, exclude_subdomains: bool) -> FetchRequest:
        return FetchRequest(url=REPORT_URL, params={"apikey": self.api_key, "domain": target})

    def parse(self, text: str) -> list[Record]:
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise SourceError(f"invalid VirusTotal response: {exc}") from exc
        if not isinstance(payload, dict):
            raise SourceError("invalid VirusTotal response: expected a JSON object")
        records: list[Record] = []
        for item in payload.get("detected_urls") or []:
            url = item.get("url") if isinstance(item, dict) else None
            if isinstance(url, str) and url:
                records.append(Record(timestamp="", url=url))
        return records


__all__ = ["REPORT_URL", "VirusTotalSource"]

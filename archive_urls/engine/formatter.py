"""Render records as output lines."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import structlog

from .record import Record

ARCHIVE_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
# Emitted when a record's timestamp cannot be parsed
PLACEHOLDER_DATE = "0001-01-01T00:00:00Z"

_TIMESTAMP_PATTERN = re.compile(r"\d{14}")


def parse_archive_timestamp(value: str) -> datetime:
    """Parse a 14-digit ``YYYYMMDDHHMMSS`` archive timestamp as UTC."""

    if not _TIMESTAMP_PATTERN.fullmatch(value or ""):
        raise ValueError(f"not a 14-digit archive timestamp: {value!r}")
    return datetime.strptime(value, ARCHIVE_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class OutputFormatter:
    """Format records as bare URLs or ``<RFC3339 date> <url>`` pairs.

    A timestamp that fails to parse is reported as a warning and the line is
    still produced, dated with :data:`PLACEHOLDER_DATE`.
    """

    def __init__(self, show_dates: bool = False, logger: structlog.BoundLogger | None = None) -> None:
        self.show_dates = show_dates
        self.logger = logger or structlog.get_logger("archive_urls.formatter")
        self.date_failures = 0

    def format(self, record: Record) -> str:
        if not self.show_dates:
            return record.url
        return f"{self.format_date(record)} {record.url}"

    def format_date(self, record: Record) -> str:
        try:
            return parse_archive_timestamp(record.timestamp).strftime(RFC3339_FORMAT)
        except ValueError:
            self.date_failures += 1
            self.logger.warning(
                "timestamp_parse_failed", timestamp=record.timestamp, url=record.url
            )
            return PLACEHOLDER_DATE


__all__ = [
    "ARCHIVE_TIMESTAMP_FORMAT",
    "OutputFormatter",
    "PLACEHOLDER_DATE",
    "parse_archive_timestamp",
]

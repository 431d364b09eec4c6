"""Normalised unit shared by every archive source."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Record:
    """A URL seen by an archive, with the capture timestamp when known.

    ``timestamp`` is either empty or a 14-digit ``YYYYMMDDHHMMSS`` string as
    reported by the source; it is not guaranteed to be parseable.
    """

    timestamp: str
    url: str


__all__ = ["Record"]

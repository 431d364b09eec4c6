"""Archive source Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import ClassVar

import structlog

from ...config import HarvestSettings, SourceName
from ...logging_conf import source_logger
from ..fetcher import FetchError, FetchRequest, Fetcher
from ..record import Record
from ..thread_pool import ConcurrencyBudget

SUBDOMAIN_WILDCARD = "*."


class SourceError(RuntimeError):
    """A source could not deliver results for one target."""


class BaseSource(ABC):
    """Uniform source contract: one target in, one request out, records back."""

    name: ClassVar[SourceName]

    def __init__(
        self,
        fetcher: Fetcher,
        settings: HarvestSettings | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.settings = settings or fetcher.settings
        self.logger = logger or source_logger(self.name.value)

    @property
    def enabled(self) -> bool:
        return True

    @staticmethod
    def query_target(target: str, exclude_subdomains: bool) -> str:
        """Prefix the subdomain wildcard unless only the exact host is wanted."""

        return target if exclude_subdomains else f"{SUBDOMAIN_WILDCARD}{target}"

    @abstractmethod
    def build_request(self, target: str, exclude_subdomains: bool) -> FetchRequest:
        """Return the single request issued for ``target``."""

    @abstractmethod
    def parse(self, text: str) -> list[Record]:
        """Decode the source's response body into records."""

    def fetch(
        self,
        target: str,
        exclude_subdomains: bool,
        budget: ConcurrencyBudget | None = None,
    ) -> list[Record]:
        """Query ``target`` and decode the response.

        Only the HTTP call holds a unit of ``budget``; decoding runs outside it.
        """

        if not self.enabled:
            self.logger.debug("source_disabled", target=target)
            return []
        request = self.build_request(target, exclude_subdomains)
        try:
            with budget.slot() if budget is not None else nullcontext():
                response = self.fetcher.fetch(request)
        except FetchError as exc:
            raise SourceError(f"{self.name.value}: {exc}") from exc
        records = self.parse(response.text)
        self.logger.debug("source_fetched", target=target, records=len(records))
        return records


__all__ = ["BaseSource", "SourceError", "SUBDOMAIN_WILDCARD"]

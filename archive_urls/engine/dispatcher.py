"""Fan a target out to every source and merge their records into one stream."""

from __future__ import annotations

from concurrent.futures import Future, wait
from dataclasses import dataclass, field
from queue import Queue
from threading import Lock, Thread
from typing import Iterator, Sequence
from urllib.parse import urlsplit

import structlog

from ..config import ConfigurationError
from .record import Record
from .sources import BaseSource, SourceError
from .thread_pool import ThreadPoolManager

_END_OF_STREAM = object()


def is_subdomain(raw_url: str, target: str) -> bool:
    """Return True when the URL's host is not exactly ``target``.

    URLs that cannot be parsed are treated as matching so they are kept.
    """

    try:
        host = urlsplit(raw_url).hostname
    except ValueError:
        return False
    return (host or "").lower() != target.strip().lower()


@dataclass
class DispatchStats:
    """Per-target bookkeeping filled in by the source tasks."""

    records: dict[str, int] = field(default_factory=dict)
    filtered: int = 0
    failed: list[str] = field(default_factory=list)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def record_success(self, source: str, emitted: int, filtered: int) -> None:
        with self._lock:
            self.records[source] = emitted
            self.filtered += filtered

    def record_failure(self, source: str) -> None:
        with self._lock:
            self.failed.append(source)


class Dispatcher:
    """Run sources concurrently and expose their records as one iterator."""

    def __init__(
        self,
        thread_pool: ThreadPoolManager,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.thread_pool = thread_pool
        self.logger = logger or structlog.get_logger("archive_urls.dispatcher")

    def run(
        self,
        target: str,
        sources: Sequence[BaseSource],
        exclude_subdomains: bool,
        stats: DispatchStats | None = None,
    ) -> Iterator[Record]:
        """Start one task per source and return the merged record stream.

        The stream ends once every task has finished, whatever its outcome.
        No ordering holds between sources; each source keeps its own order.
        """

        if not sources:
            raise ConfigurationError("no valid sources specified")
        stats = stats if stats is not None else DispatchStats()
        channel: Queue = Queue()
        executor = self.thread_pool.get()
        futures = [
            executor.submit(self._run_source, source, target, exclude_subdomains, channel, stats)
            for source in sources
        ]
        Thread(
            target=self._close_when_done,
            args=(futures, channel, target),
            name="archive-urls-closer",
            daemon=True,
        ).start()
        return self._drain(channel)

    @staticmethod
    def _drain(channel: Queue) -> Iterator[Record]:
        while True:
            item = channel.get()
            if item is _END_OF_STREAM:
                return
            yield item

    def _run_source(
        self,
        source: BaseSource,
        target: str,
        exclude_subdomains: bool,
        channel: Queue,
        stats: DispatchStats,
    ) -> None:
        name = source.name.value
        try:
            records = source.fetch(target, exclude_subdomains, budget=self.thread_pool.budget)
        except SourceError as exc:
            self.logger.debug("source_failed", source=name, target=target, error=str(exc))
            stats.record_failure(name)
            return
        emitted = filtered = 0
        for record in records:
            if exclude_subdomains and is_subdomain(record.url, target):
                filtered += 1
                continue
            channel.put(record)
            emitted += 1
        stats.record_success(name, emitted, filtered)

    def _close_when_done(self, futures: list[Future], channel: Queue, target: str) -> None:
        try:
            wait(futures)
            for future in futures:
                exc = future.exception()
                if exc is not None:
                    self.logger.error("source_task_crashed", target=target, error=repr(exc))
        finally:
            channel.put(_END_OF_STREAM)


__all__ = ["DispatchStats", "Dispatcher", "is_subdomain"]

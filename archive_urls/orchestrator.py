"""Run coordinator wiring together sources, dispatch, dedup, formatting and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .config import ConfigurationError, HarvestSettings
from .engine import (
    BaseSource,
    ConcurrencyBudget,
    DeduplicationStore,
    DispatchStats,
    Dispatcher,
    Fetcher,
    OutputFormatter,
    SOURCE_CATALOG,
    ThreadPoolManager,
    VersionLister,
    build_sources,
)
from .engine.exporter import BaseExporter, LineExporter
from .logging_conf import configure_logging
from .ui import ProgressActivity


@dataclass(slots=True)
class TargetSummary:
    """Outcome of one target (harvest mode) or one URL (version mode)."""

    target: str
    emitted: int = 0
    duplicates: int = 0
    filtered: int = 0
    records_by_source: dict[str, int] = field(default_factory=dict)
    failed_sources: list[str] = field(default_factory=list)


@dataclass(slots=True)
class RunSummary:
    mode: str
    targets: list[TargetSummary] = field(default_factory=list)
    date_failures: int = 0

    @property
    def emitted(self) -> int:
        return sum(item.emitted for item in self.targets)

    @property
    def duplicates(self) -> int:
        return sum(item.duplicates for item in self.targets)


class Orchestrator:
    """Central coordinator for one invocation.

    Targets are processed strictly one after another; within a target all
    sources run concurrently. Nothing a source does can fail the run.
    """

    def __init__(
        self,
        settings: HarvestSettings,
        fetcher: Fetcher | None = None,
        thread_pool: ThreadPoolManager | None = None,
        exporter: BaseExporter | None = None,
        progress_enabled: bool = False,
    ) -> None:
        self.settings = settings
        self.logger = configure_logging().bind(component="orchestrator")
        self.progress_enabled = progress_enabled
        self.fetcher = fetcher or Fetcher(settings)
        # Sources and the output file must resolve before any request is made
        try:
            self.sources: list[BaseSource] = (
                [] if settings.get_versions
                else build_sources(settings.sources, self.fetcher, settings)
            )
            self.exporter = exporter or LineExporter(settings.output)
        except ConfigurationError:
            self.fetcher.close()
            raise
        self.thread_pool = thread_pool or ThreadPoolManager(
            default_workers=max(settings.concurrency, len(SOURCE_CATALOG)),
            budget=ConcurrencyBudget(settings.concurrency),
        )
        self.dispatcher = Dispatcher(self.thread_pool)
        self.formatter = OutputFormatter(show_dates=settings.show_dates)
        self.version_lister = VersionLister(self.fetcher, self.thread_pool)

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    def run(self, targets: Iterable[str]) -> RunSummary:
        if self.settings.get_versions:
            return self.list_versions(targets)
        return self.harvest(targets)

    def harvest(self, targets: Iterable[str]) -> RunSummary:
        summary = RunSummary(mode="harvest")
        for target in targets:
            summary.targets.append(self.harvest_target(target))
        summary.date_failures = self.formatter.date_failures
        return summary

    def harvest_target(self, target: str) -> TargetSummary:
        result = TargetSummary(target=target)
        stats = DispatchStats()
        dedup_store = DeduplicationStore()
        activity = ProgressActivity(enabled=self.progress_enabled)
        activity.start(f"Querying {len(self.sources)} source(s) for {target}")
        try:
            stream = self.dispatcher.run(
                target, self.sources, self.settings.exclude_subdomains, stats
            )
            for record in dedup_store.unique(stream):
                # the spinner and the output share the terminal, stop it before printing
                activity.close()
                self.exporter.export(self.formatter.format(record))
                result.emitted += 1
        finally:
            activity.close()
            self.exporter.flush()
        result.duplicates = dedup_store.duplicates
        result.filtered = stats.filtered
        result.records_by_source = dict(stats.records)
        result.failed_sources = list(stats.failed)
        self.logger.debug(
            "target_done",
            target=target,
            emitted=result.emitted,
            duplicates=result.duplicates,
            failed_sources=result.failed_sources,
        )
        return result

    def list_versions(self, urls: Iterable[str]) -> RunSummary:
        summary = RunSummary(mode="versions")
        for url, versions in self.version_lister.iter_versions(urls):
            item = TargetSummary(target=url)
            if versions is None:
                item.failed_sources.append("wayback")
            else:
                self.exporter.export_many(versions)
                self.exporter.flush()
                item.emitted = len(versions)
                item.records_by_source["wayback"] = len(versions)
            summary.targets.append(item)
        return summary

    def close(self) -> None:
        self.exporter.close()
        self.thread_pool.shutdown()
        self.fetcher.close()


__all__ = ["Orchestrator", "RunSummary", "TargetSummary"]

"""Typer CLI entrypoint for archive-urls."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Iterator, NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    DEFAULT_SOURCES,
    ConfigLocator,
    ConfigRepository,
    ConfigurationError,
    HarvestSettings,
)
from .logging_conf import configure_logging
from .orchestrator import Orchestrator, RunSummary

app = typer.Typer(
    help="Fetch known URLs for domains from the Wayback Machine, Common Crawl and VirusTotal.",
    add_completion=False,
    rich_markup_mode=None,
)

# stdout carries results only; everything else goes to stderr
err_console = Console(stderr=True)


def read_targets(stream: Iterable[bytes | str]) -> Iterator[str]:
    """Yield one target per non-blank input line.

    Undecodable bytes are replaced so one bad line cannot end the batch.
    """

    for line in stream:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        text = line.strip()
        if text:
            yield text


def build_orchestrator(settings: HarvestSettings, progress_enabled: bool) -> Orchestrator:
    return Orchestrator(settings, progress_enabled=progress_enabled)


def _render_summary_table(summary: RunSummary) -> Table:
    table = Table(
        title=f"archive-urls · {summary.mode} · {len(summary.targets)} target(s)",
        box=box.SIMPLE_HEAD,
    )
    table.add_column("Target", style="cyan", overflow="fold")
    table.add_column("Emitted", style="green", justify="right")
    table.add_column("Duplicates", style="yellow", justify="right")
    table.add_column("Filtered", style="magenta", justify="right")
    table.add_column("Failed sources", style="red")
    for item in summary.targets:
        table.add_row(
            item.target,
            str(item.emitted),
            str(item.duplicates),
            str(item.filtered),
            ", ".join(item.failed_sources) or "-",
        )
    table.add_row("Total", str(summary.emitted), str(summary.duplicates), "", "")
    return table


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"archive-urls {__version__}")
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    err_console.print(message, style="red", markup=False, highlight=False)
    raise typer.Exit(code=1)


@app.command()
def main(
    target: Optional[str] = typer.Argument(
        None, help="Domain (or URL with --get-versions). Read from stdin when omitted.", show_default=False
    ),
    dates: bool = typer.Option(False, "--dates", help="Show date of fetch in the first column."),
    no_subs: bool = typer.Option(
        False, "--no-subs", help="Don't include subdomains of the target domain."
    ),
    get_versions: bool = typer.Option(
        False, "--get-versions", help="List URLs for crawled versions of input URL(s)."
    ),
    sources: Optional[str] = typer.Option(
        None,
        "--sources",
        help=f"Comma-separated list of sources to query (default: {DEFAULT_SOURCES}).",
        show_default=False,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file path (default: stdout).", show_default=False
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", help="Number of concurrent requests (default: 5).", show_default=False
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP request timeout in seconds (default: 10).", show_default=False
    ),
    vt_api_key: Optional[str] = typer.Option(
        None,
        "--vt-api-key",
        envvar="VT_API_KEY",
        help="VirusTotal API key; the source is skipped without one.",
        show_default=False,
        show_envvar=True,
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML/JSON settings file.", show_default=False
    ),
    stats: bool = typer.Option(False, "--stats", help="Print a per-target summary to stderr."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging on stderr."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    overrides = {
        # flags only override the settings file when given
        "show_dates": dates or None,
        "exclude_subdomains": no_subs or None,
        "get_versions": get_versions or None,
        "sources": sources,
        "output": output,
        "concurrency": concurrency,
        "timeout": timeout,
        "virustotal_api_key": vt_api_key,
    }
    try:
        settings = ConfigRepository(ConfigLocator(config)).load_settings(overrides)
    except ConfigurationError as exc:
        _fail(str(exc))
    configure_logging(verbose=verbose, log_dir=settings.log_dir)

    if target:
        targets: Iterable[str] = [target]
    else:
        targets = read_targets(getattr(sys.stdin, "buffer", sys.stdin))
    try:
        orchestrator = build_orchestrator(settings, progress_enabled=not verbose)
    except ConfigurationError as exc:
        _fail(str(exc))
    with orchestrator:
        summary = orchestrator.run(targets)
    if stats:
        err_console.print(_render_summary_table(summary))


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()

from __future__ import annotations

import io

from rich.console import Console

from archive_urls.ui import ProgressActivity


def test_progress_activity_disabled_without_terminal() -> None:
    console = Console(file=io.StringIO(), force_terminal=False)
    activity = ProgressActivity(enabled=True, console=console)
    assert not activity.enabled
    activity.start("Querying")
    activity.close()
    assert console.file.getvalue() == ""


def test_progress_activity_start_and_close_on_terminal() -> None:
    console = Console(file=io.StringIO(), force_terminal=True)
    with ProgressActivity(enabled=True, console=console) as activity:
        activity.start("Querying example.com")
        assert activity._status is not None
        activity.start("ignored while running")
    assert activity._status is None


def test_progress_activity_respects_disabled_flag() -> None:
    console = Console(file=io.StringIO(), force_terminal=True)
    activity = ProgressActivity(enabled=False, console=console)
    activity.start("Querying")
    assert activity._status is None

"""Terminal activity indicator rendered on stderr."""

from __future__ import annotations

from rich.console import Console
from rich.status import Status


class ProgressActivity:
    """Indeterminate activity indicator using Rich Status spinner.

    Falls back to a no-op when stderr is not an interactive terminal, so
    piped runs never see control sequences.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.enabled = enabled and self.console.is_terminal
        self._status: Status | None = None

    def start(self, message: str) -> None:
        if not self.enabled or self._status is not None:
            return
        self._status = self.console.status(message)
        self._status.start()

    def close(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def __enter__(self) -> "ProgressActivity":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["ProgressActivity"]

"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class BaseExporter(ABC):
    """Sink for formatted output lines.

    Subclasses only provide raw writes; line termination and counting live
    here so every destination produces identical output.
    """

    def __init__(self) -> None:
        self.count = 0

    def export(self, line: str) -> None:
        self._write(line if line.endswith("\n") else f"{line}\n")
        self.count += 1

    def export_many(self, lines: Iterable[str]) -> int:
        written = 0
        for line in lines:
            self.export(line)
            written += 1
        return written

    @abstractmethod
    def _write(self, text: str) -> None:
        """Write already-terminated text to the destination."""

    @abstractmethod
    def flush(self) -> None:
        """Push buffered lines out."""

    @abstractmethod
    def close(self) -> None:
        """Release the destination if this exporter owns it."""

    def __enter__(self) -> "BaseExporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["BaseExporter"]

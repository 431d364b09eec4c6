"""Line-oriented exporter writing to stdout or a file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from ...config import ConfigurationError
from .base import BaseExporter


class LineExporter(BaseExporter):
    """Write newline-terminated lines to ``path`` or, without one, to stdout.

    The file is created (truncated) up front so that an unwritable destination
    is reported before any archive is queried.
    """

    def __init__(self, path: Path | None = None, stream: TextIO | None = None) -> None:
        super().__init__()
        self.path = path
        self._owns_stream = False
        if path is not None:
            try:
                self._stream: TextIO = Path(path).open("w", encoding="utf-8", newline="\n")
            except OSError as exc:
                raise ConfigurationError(f"failed to create output file: {exc}") from exc
            self._owns_stream = True
        else:
            self._stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self._stream.write(text)

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self.flush()
        if self._owns_stream:
            self._stream.close()


__all__ = ["LineExporter"]

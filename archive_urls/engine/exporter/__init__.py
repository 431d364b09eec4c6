"""Exporter SPI and implementations."""

from .base import BaseExporter
from .line_exporter import LineExporter

__all__ = ["BaseExporter", "LineExporter"]

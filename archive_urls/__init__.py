"""archive-urls: collect historical URLs from public web archives."""

__version__ = "0.1.0"

__all__ = ["__version__"]

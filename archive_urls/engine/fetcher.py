"""HTTP fetching shared by all archive sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from ..config import HarvestSettings


class FetchError(RuntimeError):
    """Transport failure or error status returned by an archive endpoint."""


@dataclass(slots=True)
class FetchRequest:
    """Input for the fetcher."""

    url: str
    params: dict[str, Any] | None = None
    headers: dict[str, str] | None = None


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    text: str


class Fetcher:
    """Own the process-wide HTTP client and issue single GET requests.

    Every call performs exactly one request; failures are raised as
    :class:`FetchError` and never retried.
    """

    def __init__(
        self,
        settings: HarvestSettings,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or structlog.get_logger("archive_urls.fetcher")
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=settings.timeout,
            headers={"User-Agent": settings.user_agent} if settings.user_agent else None,
            transport=transport,
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, request: FetchRequest) -> FetchResponse:
        try:
            response = self._client.get(
                request.url, params=request.params, headers=request.headers
            )
        except httpx.HTTPError as exc:
            self.logger.debug("fetch_error", url=request.url, error=str(exc))
            raise FetchError(f"Request to {request.url} failed: {exc}") from exc
        if self._is_failure(response):
            self.logger.debug(
                "fetch_bad_status", url=str(response.url), status=response.status_code
            )
            raise FetchError(f"Unexpected status {response.status_code} from {response.url}")
        return FetchResponse(url=str(response.url), text=response.text)

    def get(self, url: str, params: dict[str, Any] | None = None) -> FetchResponse:
        return self.fetch(FetchRequest(url=url, params=params))

    @staticmethod
    def _is_failure(response: Any) -> bool:
        status_code = getattr(response, "status_code", 0)
        return status_code >= 400


__all__ = ["FetchError", "FetchRequest", "FetchResponse", "Fetcher"]

"""
HTTP fetching for upstream sources.

Every source adapter shares one httpx.AsyncClient per run. Requests are made
once; a failed request is reported in the FetchResult rather than retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ..config import FetchConfig


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_client(cfg: FetchConfig) -> httpx.AsyncClient:
    """Create the shared async client used by all source adapters."""
    return httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        headers={"User-Agent": cfg.user_agent},
        follow_redirects=True,
        trust_env=cfg.trust_env,
    )


async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> FetchResult:
    """Fetch a URL with a GET request.

    Args:
        client: Shared async HTTP client
        url: The URL to fetch
        params: Optional query parameters

    Returns:
        FetchResult with text on a 2xx response, or an error message for
        non-success statuses and transport failures
    """
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        return FetchResult(url=url, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")

    if not resp.is_success:
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            text=None,
            error=f"HTTP {resp.status_code}",
        )
    return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)

"""
Abstract base class for source adapters.

New sources should inherit from SourceAdapter and implement
fetch_candidates. Callers use collect(), which never raises: any failure
becomes an empty candidate list with the error recorded on the result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
import json
from typing import Any

import httpx

from ..config import SourcesConfig
from ..core.types import RawCandidate
from ..fetch.fetcher import fetch_url


class SourceError(Exception):
    """A source could not be fetched or parsed.

    Attributes:
        kind: "http_status", "transport" or "parse"
        status_code: HTTP status code when the upstream answered
    """

    def __init__(self, message: str, kind: str, status_code: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


@dataclass
class SourceResult:
    """Outcome of collecting one source.

    Attributes:
        source_key: Key of the adapter that produced the result
        candidates: Normalized candidates; empty when the source failed
        error: Error message if the source failed, None otherwise
        error_kind: Failure category mirroring SourceError.kind
    """
    source_key: str
    candidates: list[RawCandidate] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SourceAdapter(ABC):
    """Converts one upstream wire format into RawCandidate records."""

    key: str = ""
    name: str = ""

    def __init__(self, cfg: SourcesConfig | None = None, today: date | None = None):
        self.cfg = cfg or SourcesConfig()
        self.today = today

    @abstractmethod
    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        """Fetch and normalize candidates from the upstream source.

        Raises:
            SourceError: On non-success responses or unparsable payloads
        """
        raise NotImplementedError

    async def collect(self, client: httpx.AsyncClient) -> SourceResult:
        """Fetch candidates, turning every failure into an empty result."""
        try:
            candidates = await self.fetch_candidates(client)
        except SourceError as exc:
            return SourceResult(self.key, error=str(exc), error_kind=exc.kind)
        except httpx.HTTPError as exc:
            return SourceResult(self.key, error=f"{type(exc).__name__}: {exc}", error_kind="transport")
        except Exception as exc:  # noqa: BLE001
            return SourceResult(self.key, error=f"{type(exc).__name__}: {exc}", error_kind="parse")
        return SourceResult(self.key, candidates=candidates)

    async def get_text(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> str:
        result = await fetch_url(client, url, params=params)
        if not result.ok:
            kind = "transport" if result.status_code is None else "http_status"
            raise SourceError(f"{url}: {result.error}", kind, result.status_code)
        return result.text or ""

    async def get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        text = await self.get_text(client, url, params=params)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise SourceError(f"{url}: invalid JSON ({exc})", "parse") from exc

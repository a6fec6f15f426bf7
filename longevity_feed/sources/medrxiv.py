"""medRxiv preprints via the bioRxiv/medRxiv details API."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import httpx

from ..core.normalize import build_external_id, normalize_date
from ..core.types import RawCandidate
from .base import SourceAdapter, SourceError


class MedrxivSource(SourceAdapter):
    """Recent medRxiv preprints within the configured lookback window."""

    key = "medrxiv"
    name = "medRxiv"
    base_url = "https://api.biorxiv.org/details/medrxiv"

    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        end = self.today or datetime.now(timezone.utc).date()
        start = end - timedelta(days=self.cfg.lookback_days)
        items: list[RawCandidate] = []
        cursor = 0

        for _ in range(max(1, self.cfg.max_pages)):
            data = await self.get_json(client, self._page_url(start, end, cursor))
            if not isinstance(data, dict):
                raise SourceError(f"{self.key}: expected a JSON object", "parse")
            collection = data.get("collection") or []
            for entry in collection:
                candidate = self.parse_entry(entry)
                if candidate is not None:
                    items.append(candidate)
            if len(items) >= self.cfg.page_size or not collection:
                break
            cursor += len(collection)
        return items[: self.cfg.page_size]

    def parse_entry(self, entry: dict[str, Any]) -> RawCandidate | None:
        title = entry.get("title")
        abstract = entry.get("abstract")
        doi = entry.get("doi")
        if not title or not abstract or not doi:
            return None
        return RawCandidate(
            external_id=build_external_id(self.key, doi),
            title=title.strip(),
            abstract=abstract.strip(),
            source_name=self.name,
            source_url=f"https://doi.org/{doi}",
            source_type="research_paper",
            evidence_quality="observational",
            published_date=normalize_date(entry.get("date"), self.today),
        )

    def _page_url(self, start: date, end: date, cursor: int) -> str:
        return f"{self.base_url}/{start.isoformat()}/{end.isoformat()}/{cursor}"

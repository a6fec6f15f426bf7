"""ClinicalTrials.gov v2 studies API."""

from __future__ import annotations

from typing import Any

import httpx

from ..core.normalize import build_external_id, normalize_date
from ..core.types import RawCandidate
from .base import SourceAdapter, SourceError


class ClinicalTrialsSource(SourceAdapter):
    """Registered studies matching the configured keywords."""

    key = "ctgov"
    name = "ClinicalTrials.gov"
    url = "https://clinicaltrials.gov/api/v2/studies"

    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        params: dict[str, Any] = {
            "format": "json",
            "pageSize": self.cfg.page_size,
            "query.term": " OR ".join(self.cfg.keywords),
        }
        items: list[RawCandidate] = []
        for _ in range(max(1, self.cfg.max_pages)):
            data = await self.get_json(client, self.url, params=params)
            if not isinstance(data, dict):
                raise SourceError(f"{self.key}: expected a JSON object", "parse")
            for study in data.get("studies") or []:
                candidate = self.parse_study(study)
                if candidate is not None:
                    items.append(candidate)
            token = data.get("nextPageToken")
            if not token:
                break
            params = {**params, "pageToken": token}
        return items

    def parse_study(self, study: dict[str, Any]) -> RawCandidate | None:
        protocol = study.get("protocolSection") or {}
        id_module = protocol.get("identificationModule") or {}
        description = protocol.get("descriptionModule") or {}
        design = protocol.get("designModule") or {}
        status = protocol.get("statusModule") or {}

        nct_id = id_module.get("nctId")
        title = id_module.get("briefTitle")
        abstract = description.get("briefSummary")
        if not nct_id or not title or not abstract:
            return None

        raw_date = (status.get("studyFirstPostDateStruct") or {}).get("date") or (
            status.get("startDateStruct") or {}
        ).get("date")
        allocation = str((design.get("designInfo") or {}).get("allocation") or "")

        return RawCandidate(
            external_id=build_external_id(self.key, nct_id),
            title=title.strip(),
            abstract=abstract.strip(),
            source_name=self.name,
            source_url=f"https://clinicaltrials.gov/study/{nct_id}",
            source_type="clinical_trial",
            evidence_quality="rct" if allocation.upper() == "RANDOMIZED" else "observational",
            published_date=normalize_date(raw_date, self.today),
        )

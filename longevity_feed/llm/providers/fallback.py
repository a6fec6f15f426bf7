"""Deterministic offline provider used when no credential is configured."""

from __future__ import annotations

from ...core.types import Enrichment, RawCandidate
from .base import EnrichmentProvider


FALLBACK_TAKEAWAYS = (
    "Use this as educational context, not individualized medical advice.",
    "Check source quality and publication type before acting.",
    "Compare claims against multiple high-quality sources.",
)


class TemplateProvider(EnrichmentProvider):
    """Builds enrichment fields from the candidate alone; never calls out."""

    name = "template"
    model = "template"

    def enrich(self, candidate: RawCandidate) -> Enrichment:
        explanation = (
            f"This piece discusses {candidate.title.lower()}. The key point is to "
            "interpret findings carefully, compare with broader evidence, and avoid "
            "overgeneralizing from a single source."
        )
        return Enrichment(
            laymans_explanation=explanation,
            key_takeaways=list(FALLBACK_TAKEAWAYS),
            technical_summary=candidate.abstract[: self.enrich_cfg.summary_chars],
        )

"""
Record assembly: enrichment, classification and slug allocation.

Candidates are processed strictly one after another so that outbound
requests to the generation service stay sequential. A provider failure
propagates immediately; no partially enriched batch is returned.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from ..config import EnrichmentConfig
from ..core.slugs import SlugRegistry
from ..core.taxonomy import classify
from ..core.types import ArticleRecord, RawCandidate
from ..llm.providers.base import EnrichmentProvider
from ..utils.logging import log_event


class RecordEnricher:
    """Turns surviving candidates into corpus records.

    Attributes:
        provider: Generation provider (remote or template fallback)
        cfg: Enrichment sizes and limits
        slugs: Registry seeded with the slugs already in the corpus
    """

    def __init__(
        self,
        provider: EnrichmentProvider,
        cfg: EnrichmentConfig,
        slugs: SlugRegistry,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.cfg = cfg
        self.slugs = slugs
        self.logger = logger

    def build_record(self, candidate: RawCandidate) -> ArticleRecord:
        """Enrich and classify one candidate.

        Raises:
            EnrichmentError: If the provider fails
        """
        enrichment = self.provider.enrich(candidate)
        summary = enrichment.technical_summary or candidate.abstract[: self.cfg.summary_chars]
        return ArticleRecord(
            external_id=candidate.external_id,
            slug=self.slugs.allocate(candidate.title, candidate.external_id),
            title=candidate.title,
            excerpt=summary[: self.cfg.excerpt_chars],
            technical_summary=summary,
            laymans_explanation=enrichment.laymans_explanation,
            key_takeaways=list(enrichment.key_takeaways)[: self.cfg.max_takeaways],
            source_name=candidate.source_name,
            source_url=candidate.source_url,
            source_type=candidate.source_type,
            evidence_quality=candidate.evidence_quality,
            published_date=candidate.published_date,
            categories=classify(f"{candidate.title} {candidate.abstract}"),
        )

    def enrich_all(
        self,
        candidates: Iterable[RawCandidate],
        on_item: Callable[[ArticleRecord], None] | None = None,
    ) -> list[ArticleRecord]:
        """Build records sequentially, in candidate order."""
        records: list[ArticleRecord] = []
        for candidate in candidates:
            record = self.build_record(candidate)
            log_event(
                self.logger,
                "Enriched item",
                event="enrich_item",
                external_id=record.external_id,
                slug=record.slug,
                provider=self.provider.name,
                categories=[c.slug for c in record.categories],
            )
            records.append(record)
            if on_item is not None:
                on_item(record)
        return records

"""
Core data types for the Longevity Feed pipeline.

This module defines the fundamental data structures used throughout the pipeline:
- RawCandidate: Normalized record produced by a source adapter
- Category: Topic taxonomy entry attached to records
- Enrichment: Lay-language fields produced by a generation provider
- ArticleRecord: Fully assembled record as stored in the corpus
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


SOURCE_TYPES = ("research_paper", "clinical_trial", "review", "news", "guideline")
EVIDENCE_QUALITIES = ("rct", "meta_analysis", "review", "observational", "editorial")


@dataclass
class RawCandidate:
    """A not-yet-enriched record produced by a source adapter.

    Attributes:
        external_id: Dedup key in the form "{source_key}:{local_id}"
        title: The item headline
        abstract: Source text used for enrichment and classification
        source_name: Human-readable name of the publishing source
        source_url: Link to the original item
        source_type: One of SOURCE_TYPES
        evidence_quality: One of EVIDENCE_QUALITIES
        published_date: Canonical YYYY-MM-DD date
    """
    external_id: str
    title: str
    abstract: str
    source_name: str
    source_url: str
    source_type: str
    evidence_quality: str
    published_date: str


@dataclass(frozen=True)
class Category:
    """A topic category from the fixed taxonomy.

    Attributes:
        slug: URL-safe identifier used by the rendering layer
        name: Display name
        description: One-line description shown on category pages
        keywords: Lowercase substrings that assign the category
    """
    slug: str
    name: str
    description: str
    keywords: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, str]:
        return {"slug": self.slug, "name": self.name, "description": self.description}


@dataclass
class Enrichment:
    """Lay-language fields for a single candidate."""
    laymans_explanation: str
    key_takeaways: list[str] = field(default_factory=list)
    technical_summary: str = ""


@dataclass
class ArticleRecord:
    """A fully enriched and classified record, ready to merge into the corpus."""
    external_id: str
    slug: str
    title: str
    excerpt: str
    technical_summary: str
    laymans_explanation: str
    key_takeaways: list[str]
    source_name: str
    source_url: str
    source_type: str
    evidence_quality: str
    published_date: str
    categories: list[Category] = field(default_factory=list)

    @property
    def has_explanation(self) -> bool:
        return bool(self.laymans_explanation)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the corpus file's camelCase field names and order."""
        return {
            "externalId": self.external_id,
            "slug": self.slug,
            "title": self.title,
            "excerpt": self.excerpt,
            "technicalSummary": self.technical_summary,
            "laymansExplanation": self.laymans_explanation,
            "keyTakeaways": list(self.key_takeaways),
            "hasExplanation": self.has_explanation,
            "sourceName": self.source_name,
            "sourceUrl": self.source_url,
            "sourceType": self.source_type,
            "evidenceQuality": self.evidence_quality,
            "publishedDate": self.published_date,
            "categories": [category.to_dict() for category in self.categories],
        }

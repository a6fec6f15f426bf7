"""
Core domain models and business logic.

This package contains data types and business logic that is
independent of any specific source or provider.
"""

from .types import ArticleRecord, Category, Enrichment, RawCandidate
from .normalize import build_external_id, normalize_date, normalize_slug, strip_html
from .slugs import SlugRegistry, short_hash
from .dedup import filter_new_candidates
from .taxonomy import TAXONOMY, classify
from .corpus import CorpusStore, merge_records

__all__ = [
    "ArticleRecord",
    "Category",
    "Enrichment",
    "RawCandidate",
    "build_external_id",
    "normalize_date",
    "normalize_slug",
    "strip_html",
    "SlugRegistry",
    "short_hash",
    "filter_new_candidates",
    "TAXONOMY",
    "classify",
    "CorpusStore",
    "merge_records",
]

"""
Candidate deduplication against the persisted corpus.

This module removes candidates that must not consume an enrichment call:
1. Malformed candidates (missing id, title or abstract, or an unknown
   source type or evidence quality)
2. Candidates whose externalId is already in the corpus or earlier in the batch
3. Optionally, candidates whose title is near-identical to a known title
"""

from __future__ import annotations

from typing import Any, Iterable

from rapidfuzz import fuzz

from .types import EVIDENCE_QUALITIES, SOURCE_TYPES, RawCandidate


def filter_new_candidates(
    candidates: Iterable[RawCandidate],
    existing: Iterable[dict[str, Any]],
    fuzzy_titles: bool = False,
    threshold: int = 92,
) -> list[RawCandidate]:
    """Return candidates not yet present in the corpus, preserving order.

    Args:
        candidates: Candidates gathered from all sources
        existing: Records of the current corpus
        fuzzy_titles: Whether to also drop titles similar to known titles
        threshold: Similarity threshold (0-100) for fuzzy title matching

    Returns:
        Candidates whose externalId is new to both the corpus and the batch
    """
    existing = list(existing)
    seen_ids: set[str] = {r.get("externalId") for r in existing if r.get("externalId")}
    titles: list[str] = [r["title"] for r in existing if r.get("title")] if fuzzy_titles else []
    kept: list[RawCandidate] = []

    for candidate in candidates:
        if not _is_well_formed(candidate):
            continue
        if candidate.external_id in seen_ids:
            continue
        if fuzzy_titles and _is_similar_title(candidate.title, titles, threshold):
            continue
        seen_ids.add(candidate.external_id)
        titles.append(candidate.title)
        kept.append(candidate)

    return kept


def _is_well_formed(candidate: RawCandidate) -> bool:
    return bool(
        candidate.external_id
        and candidate.title
        and candidate.abstract
        and candidate.source_type in SOURCE_TYPES
        and candidate.evidence_quality in EVIDENCE_QUALITIES
    )


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio function which calculates the Levenshtein
    distance as a similarity percentage.
    """
    for existing in titles:
        if fuzz.ratio(title, existing) >= threshold:
            return True
    return False

"""Source adapter registry.

Maps source keys to adapter classes. Which sources a run actually uses is
decided by SourcesConfig.enabled, not by which adapters exist.
"""

from __future__ import annotations

from datetime import date

from ..config import SourcesConfig
from .base import SourceAdapter, SourceError, SourceResult
from .clinical_trials import ClinicalTrialsSource
from .medrxiv import MedrxivSource
from .nih_news import NihNewsSource
from .pubmed import PubMedSource
from .rss import WhoNewsSource, parse_rss_items


SOURCE_REGISTRY: dict[str, type[SourceAdapter]] = {
    ClinicalTrialsSource.key: ClinicalTrialsSource,
    MedrxivSource.key: MedrxivSource,
    PubMedSource.key: PubMedSource,
    NihNewsSource.key: NihNewsSource,
    WhoNewsSource.key: WhoNewsSource,
}


def available_sources() -> list[str]:
    """Return the set of registered source keys."""
    return sorted(SOURCE_REGISTRY.keys())


def build_sources(cfg: SourcesConfig, today: date | None = None) -> list[SourceAdapter]:
    """Instantiate the enabled adapters in configured priority order."""
    adapters: list[SourceAdapter] = []
    for key in cfg.enabled:
        builder = SOURCE_REGISTRY.get(key.lower().strip())
        if builder is None:
            supported = ", ".join(available_sources())
            raise ValueError(f"Unsupported source: {key}. Supported: {supported}")
        adapters.append(builder(cfg, today=today))
    return adapters


__all__ = [
    "SOURCE_REGISTRY",
    "SourceAdapter",
    "SourceError",
    "SourceResult",
    "ClinicalTrialsSource",
    "MedrxivSource",
    "NihNewsSource",
    "PubMedSource",
    "WhoNewsSource",
    "available_sources",
    "build_sources",
    "parse_rss_items",
]

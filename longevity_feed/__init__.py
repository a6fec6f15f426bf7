"""
Longevity Feed - research-content ingestion pipeline.

This package pulls longevity-related research and health news from
registries, preprint servers, literature search and news feeds,
normalizes and deduplicates them, adds lay-language explanations, and
merges the results into a size-capped JSON corpus.

Main entry point is the CLI via `longevity-feed run` command.

Example:
    $ longevity-feed run --corpus data/articles.json
"""

__all__ = ["__version__", "run_pipeline", "normalize_slug", "normalize_date", "classify"]
__version__ = "0.1.0"

from .core.normalize import normalize_date, normalize_slug
from .core.taxonomy import classify
from .runner import run_pipeline

"""
Main pipeline orchestration for Longevity Feed.

This module coordinates one ingestion run:
1. Read the corpus (single-owner session)
2. Fetch candidates from the enabled sources concurrently
3. Drop candidates already in the corpus
4. Enrich and classify the surviving batch sequentially
5. Merge, sort and cap the corpus, then write it back atomically

Source failures are absorbed per source. Enrichment and corpus failures
abort the run before anything is written. Runs must not overlap.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from .analyzers.enricher import RecordEnricher
from .config import AppConfig, FetchConfig
from .core.corpus import CorpusStore, merge_records
from .core.dedup import filter_new_candidates
from .core.slugs import SlugRegistry
from .core.types import RawCandidate
from .fetch.fetcher import build_client
from .llm.providers.base import EnrichmentProvider
from .llm.providers.factory import create_provider
from .sources import SourceAdapter, SourceResult, build_sources
from .utils.logging import log_event, setup_llm_logger, setup_logging


@dataclass
class RunStats:
    """Statistics collected during one run.

    Attributes:
        fetched: Candidate count per source key
        failed: Error message per failed source key
        candidates: Candidates kept after the per-source limit
        survivors: Candidates that passed the dedup gate
        added: Records enriched and merged
        corpus_size: Records in the corpus after the merge
        written: Whether the corpus file was rewritten
    """
    fetched: dict[str, int] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    candidates: int = 0
    survivors: int = 0
    added: int = 0
    corpus_size: int = 0
    written: bool = False


def run_pipeline(
    cfg: AppConfig,
    corpus_path: Path | None = None,
    show_progress: bool = True,
    console: Console | None = None,
    dry_run: bool = False,
    today: date | None = None,
    adapters: Sequence[SourceAdapter] | None = None,
    provider: EnrichmentProvider | None = None,
) -> RunStats:
    """Run one ingestion pass over the enabled sources.

    Args:
        cfg: Application configuration
        corpus_path: Corpus file; defaults to cfg.corpus.path
        show_progress: Whether to display a progress bar for enrichment
        console: Rich console for output (creates default if None)
        dry_run: Run every stage but leave the corpus file untouched
        today: Date used for unparsable source dates (defaults to today, UTC)
        adapters: Source adapters to use instead of the configured set
        provider: Enrichment provider to use instead of the configured one

    Returns:
        RunStats describing the run

    Raises:
        EnrichmentError: If the generation service fails
        CorpusError: If the corpus cannot be read or written
    """
    log_dir = Path(cfg.logging.directory) if cfg.logging.directory else None
    logger = setup_logging(cfg.logging, log_dir)
    llm_logger = setup_llm_logger(cfg.logging, log_dir)
    store = CorpusStore(corpus_path or Path(cfg.corpus.path))
    if adapters is None:
        adapters = build_sources(cfg.sources, today=today)
    stats = RunStats()

    log_event(
        logger,
        "Pipeline start",
        event="pipeline_start",
        corpus=str(store.path),
        sources=[adapter.key for adapter in adapters],
    )

    with store.session() as session:
        results = asyncio.run(gather_sources(adapters, cfg.fetch, logger))
        for result in results:
            stats.fetched[result.source_key] = len(result.candidates)
            if not result.ok:
                stats.failed[result.source_key] = result.error or ""

        candidates = prioritize(results, cfg.sources.per_source_limit)
        fresh = filter_new_candidates(
            candidates,
            session.records,
            fuzzy_titles=cfg.dedup.fuzzy_titles,
            threshold=cfg.dedup.title_similarity_threshold,
        )
        batch = fresh[: cfg.enrichment.batch_size]
        stats.candidates = len(candidates)
        stats.survivors = len(fresh)
        log_event(
            logger,
            "Dedup complete",
            event="dedup_complete",
            candidates=len(candidates),
            survivors=len(fresh),
            batch=len(batch),
        )

        if provider is None:
            provider = create_provider(cfg.provider, cfg.enrichment, cfg.logging, llm_logger)
        enricher = RecordEnricher(provider, cfg.enrichment, SlugRegistry(session.slugs), logger)
        records = _enrich_batch(enricher, batch, show_progress, console)

        merged = merge_records(
            [record.to_dict() for record in records],
            session.records,
            cfg.corpus.max_records,
        )
        stats.added = len(records)
        stats.corpus_size = len(merged)
        if not dry_run:
            session.commit(merged)
            stats.written = True

    logger.info("Updated %s with %d new items", store.path.name, stats.added)
    log_event(
        logger,
        "Pipeline complete",
        event="pipeline_complete",
        added=stats.added,
        corpus_size=stats.corpus_size,
        failed_sources=sorted(stats.failed),
        dry_run=dry_run,
    )
    return stats


async def gather_sources(
    adapters: Sequence[SourceAdapter],
    fetch_cfg: FetchConfig,
    logger: logging.Logger | None = None,
) -> list[SourceResult]:
    """Collect all sources concurrently, at most fetch_cfg.concurrency at a time.

    Results come back in adapter order. Every source is joined before the
    caller continues; a failing source yields an empty result.
    """
    semaphore = asyncio.Semaphore(max(1, fetch_cfg.concurrency))

    async with build_client(fetch_cfg) as client:

        async def _collect(adapter: SourceAdapter) -> SourceResult:
            async with semaphore:
                result = await adapter.collect(client)
            if result.ok:
                log_event(
                    logger,
                    "Source fetched",
                    event="source_fetched",
                    source=adapter.key,
                    count=len(result.candidates),
                )
            elif logger is not None:
                logger.warning(
                    "Source %s failed (%s): %s",
                    adapter.key,
                    result.error_kind,
                    result.error,
                    extra={"event": "source_failed", "source": adapter.key},
                )
            return result

        tasks = [asyncio.create_task(_collect(adapter)) for adapter in adapters]
        return list(await asyncio.gather(*tasks))


def prioritize(results: Sequence[SourceResult], per_source_limit: int) -> list[RawCandidate]:
    """Take at most per_source_limit candidates from each source, in source order."""
    candidates: list[RawCandidate] = []
    for result in results:
        candidates.extend(result.candidates[:per_source_limit])
    return candidates


def _enrich_batch(
    enricher: RecordEnricher,
    batch: list[RawCandidate],
    show_progress: bool,
    console: Console | None,
):
    if not show_progress or not batch:
        return enricher.enrich_all(batch)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console or Console(),
    )
    with progress:
        task = progress.add_task("Enrich", total=len(batch))
        return enricher.enrich_all(batch, on_item=lambda _record: progress.advance(task, 1))

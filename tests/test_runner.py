"""End-to-end tests for one ingestion run with stubbed sources and providers."""

from __future__ import annotations

import asyncio
from datetime import date
import json

import pytest

from longevity_feed.config import AppConfig, FetchConfig
from longevity_feed.core.corpus import dump_corpus
from longevity_feed.core.types import RawCandidate
from longevity_feed.errors import EnrichmentError
from longevity_feed.llm.providers.fallback import TemplateProvider
from longevity_feed.runner import gather_sources, prioritize, run_pipeline
from longevity_feed.sources import SourceAdapter, SourceError, SourceResult


TODAY = date(2026, 3, 14)


def _candidate(source_key, local_id, title, published="2024-02-05"):
    return RawCandidate(
        external_id=f"{source_key}:{local_id}",
        title=title,
        abstract=f"{title}. Details from the source.",
        source_name=source_key.upper(),
        source_url=f"https://example.org/{source_key}/{local_id}",
        source_type="news",
        evidence_quality="editorial",
        published_date=published,
    )


class _StubSource(SourceAdapter):
    def __init__(self, key, candidates=None, error=None):
        super().__init__(today=TODAY)
        self.key = key
        self.name = key
        self._candidates = candidates or []
        self._error = error

    async def fetch_candidates(self, client):
        if self._error is not None:
            raise self._error
        return list(self._candidates)


class _FailingProvider(TemplateProvider):
    name = "failing"

    def __init__(self, cfg, fail_on):
        super().__init__(cfg.enrichment)
        self.fail_on = fail_on

    def enrich(self, candidate):
        if candidate.external_id == self.fail_on:
            raise EnrichmentError("HTTP 500 from generation service", status_code=500)
        return super().enrich(candidate)


@pytest.fixture
def cfg():
    config = AppConfig()
    config.logging.console = False
    return config


def _run(cfg, corpus, adapters, provider=None, **kwargs):
    return run_pipeline(
        cfg,
        corpus_path=corpus,
        show_progress=False,
        today=TODAY,
        adapters=adapters,
        provider=provider or TemplateProvider(cfg.enrichment),
        **kwargs,
    )


def _who_feed():
    return _StubSource(
        "whonews",
        [
            _candidate("whonews", "xyz", "Study links afternoon sun exposure to better sleep quality"),
            _candidate("whonews", "abc", "Protein timing and muscle strength", "2024-03-01"),
        ],
    )


def test_run_writes_enriched_records(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    stats = _run(cfg, corpus, [_who_feed()])

    records = json.loads(corpus.read_text(encoding="utf-8"))
    assert stats.added == 2
    assert stats.written
    assert [r["externalId"] for r in records] == ["whonews:abc", "whonews:xyz"]
    sleep = records[1]
    assert sleep["slug"] == "study-links-afternoon-sun-exposure-to-better-sleep-quality"
    assert sleep["hasExplanation"] is True
    assert "sleep" in [c["slug"] for c in sleep["categories"]]


def test_second_run_is_byte_identical(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    _run(cfg, corpus, [_who_feed()])
    first = corpus.read_bytes()

    stats = _run(cfg, corpus, [_who_feed()])

    assert stats.survivors == 0
    assert stats.added == 0
    assert corpus.read_bytes() == first


def test_items_already_in_corpus_are_not_enriched(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    existing = [{"externalId": "whonews:xyz", "slug": "old", "title": "Old", "publishedDate": "2024-01-01"}]
    corpus.write_text(dump_corpus(existing), encoding="utf-8")

    stats = _run(cfg, corpus, [_who_feed()], provider=_FailingProvider(cfg, fail_on="whonews:xyz"))

    records = json.loads(corpus.read_text(encoding="utf-8"))
    assert stats.added == 1
    assert [r["externalId"] for r in records] == ["whonews:abc", "whonews:xyz"]
    assert records[1] == existing[0]


def test_enrichment_failure_leaves_corpus_untouched(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    original = dump_corpus([{"externalId": "nihnews:a", "slug": "a", "publishedDate": "2024-01-01"}])
    corpus.write_text(original, encoding="utf-8")

    with pytest.raises(EnrichmentError):
        _run(cfg, corpus, [_who_feed()], provider=_FailingProvider(cfg, fail_on="whonews:abc"))

    assert corpus.read_text(encoding="utf-8") == original


def test_failed_source_does_not_block_others(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    broken = _StubSource("nihnews", error=SourceError("HTTP 503", "http_status", 503))

    stats = _run(cfg, corpus, [broken, _who_feed()])

    assert stats.failed == {"nihnews": "HTTP 503"}
    assert stats.fetched == {"nihnews": 0, "whonews": 2}
    assert stats.added == 2


def test_all_sources_failing_still_writes_corpus(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    broken = _StubSource("whonews", error=SourceError("unreachable", "transport"))

    stats = _run(cfg, corpus, [broken])

    assert stats.added == 0
    assert json.loads(corpus.read_text(encoding="utf-8")) == []


def test_colliding_titles_get_unique_slugs(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    existing = [
        {
            "externalId": "nihnews:old",
            "slug": "sleep-and-aging",
            "title": "Sleep and aging",
            "publishedDate": "2024-01-01",
        }
    ]
    corpus.write_text(dump_corpus(existing), encoding="utf-8")
    feed = _StubSource(
        "whonews",
        [_candidate("whonews", "1", "Sleep and aging"), _candidate("whonews", "2", "Sleep and aging")],
    )

    _run(cfg, corpus, [feed])

    slugs = [r["slug"] for r in json.loads(corpus.read_text(encoding="utf-8"))]
    assert len(slugs) == len(set(slugs)) == 3
    assert all(s.startswith("sleep-and-aging") for s in slugs)


def test_dry_run_does_not_write(cfg, tmp_path):
    corpus = tmp_path / "articles.json"
    stats = _run(cfg, corpus, [_who_feed()], dry_run=True)

    assert stats.added == 2
    assert not stats.written
    assert not corpus.exists()


def test_batch_size_caps_enrichment(cfg, tmp_path):
    cfg.enrichment.batch_size = 1
    corpus = tmp_path / "articles.json"

    stats = _run(cfg, corpus, [_who_feed()])

    assert stats.survivors == 2
    assert stats.added == 1
    assert [r["externalId"] for r in json.loads(corpus.read_text(encoding="utf-8"))] == ["whonews:xyz"]


def test_prioritize_applies_per_source_limit_in_source_order():
    results = [
        SourceResult("nihnews", [_candidate("nihnews", str(i), f"NIH {i}") for i in range(4)]),
        SourceResult("whonews", [_candidate("whonews", "1", "WHO 1")]),
    ]
    picked = prioritize(results, per_source_limit=2)
    assert [c.external_id for c in picked] == ["nihnews:0", "nihnews:1", "whonews:1"]


def test_gather_sources_keeps_adapter_order():
    adapters = [
        _StubSource("whonews", [_candidate("whonews", "1", "WHO 1")]),
        _StubSource("nihnews", error=SourceError("bad", "parse")),
        _StubSource("ctgov", [_candidate("ctgov", "nct1", "Trial 1")]),
    ]
    results = asyncio.run(gather_sources(adapters, FetchConfig(concurrency=1)))
    assert [r.source_key for r in results] == ["whonews", "nihnews", "ctgov"]
    assert [r.ok for r in results] == [True, False, True]

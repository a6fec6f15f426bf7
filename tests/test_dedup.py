"""Tests for the corpus deduplication gate."""

from longevity_feed.core.dedup import filter_new_candidates
from longevity_feed.core.types import RawCandidate


def _candidate(external_id, title="A title", abstract="An abstract"):
    return RawCandidate(
        external_id=external_id,
        title=title,
        abstract=abstract,
        source_name="WHO News",
        source_url="https://www.who.int/news/item/x",
        source_type="news",
        evidence_quality="editorial",
        published_date="2024-02-05",
    )


def test_drops_candidates_already_in_corpus():
    existing = [{"externalId": "whonews:xyz", "title": "Old"}]
    kept = filter_new_candidates([_candidate("whonews:xyz"), _candidate("whonews:new")], existing)
    assert [c.external_id for c in kept] == ["whonews:new"]


def test_second_pass_over_same_feed_has_no_survivors():
    feed = [_candidate("whonews:a"), _candidate("nihnews:b")]
    first = filter_new_candidates(feed, [])
    corpus = [{"externalId": c.external_id, "title": c.title} for c in first]
    assert filter_new_candidates(feed, corpus) == []


def test_drops_repeats_within_batch_and_malformed():
    batch = [
        _candidate("whonews:a"),
        _candidate("whonews:a", title="Repeated"),
        _candidate("", title="No id"),
        _candidate("whonews:b", title=""),
        _candidate("whonews:c", abstract=""),
    ]
    kept = filter_new_candidates(batch, [])
    assert [c.external_id for c in kept] == ["whonews:a"]


def test_fuzzy_titles_checks_corpus_and_batch():
    existing = [{"externalId": "nihnews:one", "title": "NIH study finds exercise slows aging"}]
    batch = [
        _candidate("whonews:one", title="NIH study finds exercise slows aging."),
        _candidate("whonews:two", title="Sleep timing and metabolic health"),
        _candidate("whonews:three", title="Sleep timing and metabolic health!"),
    ]
    kept = filter_new_candidates(batch, existing, fuzzy_titles=True, threshold=92)
    assert [c.external_id for c in kept] == ["whonews:two"]

    assert len(filter_new_candidates(batch, existing)) == 3


def test_drops_candidates_with_unknown_source_type_or_quality():
    odd_type = _candidate("whonews:a")
    odd_type.source_type = "podcast"
    odd_quality = _candidate("whonews:b")
    odd_quality.evidence_quality = "anecdote"
    kept = filter_new_candidates([odd_type, odd_quality, _candidate("whonews:c")], [])
    assert [c.external_id for c in kept] == ["whonews:c"]

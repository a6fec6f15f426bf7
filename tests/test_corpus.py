"""Tests for corpus merge and persistence."""

from datetime import date, timedelta
import json

import pytest

from longevity_feed.core.corpus import CorpusStore, dump_corpus, merge_records
from longevity_feed.errors import CorpusError


def _record(external_id, published):
    return {"externalId": external_id, "slug": external_id.replace(":", "-"), "publishedDate": published}


def test_merge_sorts_descending_and_puts_new_first_on_ties():
    existing = [_record("a:1", "2024-01-01"), _record("a:2", "2024-03-01")]
    new = [_record("n:1", "2024-03-01"), _record("n:2", "2023-12-31")]
    merged = merge_records(new, existing)
    assert [r["externalId"] for r in merged] == ["n:1", "a:2", "a:1", "n:2"]


def test_merge_caps_at_200_keeping_most_recent():
    start = date(2023, 1, 1)
    existing = [_record(f"old:{i}", (start + timedelta(days=i)).isoformat()) for i in range(200)]
    new = [_record(f"new:{i}", (start + timedelta(days=300 + i)).isoformat()) for i in range(5)]
    merged = merge_records(new, existing, max_records=200)

    assert len(merged) == 200
    dates = [r["publishedDate"] for r in merged]
    assert dates == sorted(dates, reverse=True)
    kept_ids = {r["externalId"] for r in merged}
    assert {f"new:{i}" for i in range(5)} <= kept_ids
    assert not {f"old:{i}" for i in range(5)} & kept_ids


def test_dump_corpus_format():
    text = dump_corpus([{"title": "Café", "keyTakeaways": []}])
    assert text.endswith("]\n")
    assert "Café" in text
    assert text.startswith('[\n  {\n    "title"')


def test_missing_corpus_reads_as_empty(tmp_path):
    store = CorpusStore(tmp_path / "articles.json")
    assert store.read() == []


def test_malformed_corpus_raises(tmp_path):
    path = tmp_path / "articles.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CorpusError):
        CorpusStore(path).read()

    path.write_text('{"articles": []}', encoding="utf-8")
    with pytest.raises(CorpusError, match="JSON array"):
        CorpusStore(path).read()


def test_session_writes_only_on_commit(tmp_path):
    path = tmp_path / "articles.json"
    original = dump_corpus([_record("a:1", "2024-01-01")])
    path.write_text(original, encoding="utf-8")
    store = CorpusStore(path)

    with store.session() as session:
        assert session.external_ids == {"a:1"}
        assert session.slugs == {"a-1"}
    assert path.read_text(encoding="utf-8") == original

    with store.session() as session:
        session.commit([_record("b:1", "2024-02-01"), *session.records])
    assert [r["externalId"] for r in json.loads(path.read_text(encoding="utf-8"))] == ["b:1", "a:1"]


def test_session_does_not_write_when_block_raises(tmp_path):
    path = tmp_path / "articles.json"
    original = dump_corpus([_record("a:1", "2024-01-01")])
    path.write_text(original, encoding="utf-8")

    with pytest.raises(RuntimeError):
        with CorpusStore(path).session() as session:
            session.commit([])
            raise RuntimeError("enrichment blew up")

    assert path.read_text(encoding="utf-8") == original
    assert list(tmp_path.iterdir()) == [path]


def test_write_preserves_unknown_fields(tmp_path):
    path = tmp_path / "articles.json"
    records = [{"externalId": "a:1", "image": "https://img.example/a.png", "publishedDate": "2024-01-01"}]
    store = CorpusStore(path)
    store.write(records)
    assert store.read() == records


def test_corpus_with_non_object_entries_raises(tmp_path):
    path = tmp_path / "articles.json"
    path.write_text('[{"externalId": "a:1"}, "stray", 3]', encoding="utf-8")
    with pytest.raises(CorpusError, match="2 entries that are not objects"):
        CorpusStore(path).read()

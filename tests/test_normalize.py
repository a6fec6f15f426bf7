"""Tests for date, identity and slug normalizers."""

from datetime import date

from longevity_feed.core.normalize import (
    build_external_id,
    infer_evidence_quality,
    infer_source_type,
    normalize_date,
    normalize_slug,
    strip_html,
)
from longevity_feed.core.slugs import SlugRegistry, short_hash


TODAY = date(2026, 3, 14)


def test_normalize_slug_basic_title():
    title = "Study links afternoon sun exposure to better sleep quality"
    assert normalize_slug(title) == "study-links-afternoon-sun-exposure-to-better-sleep-quality"


def test_normalize_slug_collapses_and_strips():
    assert normalize_slug("  AI & Machine Learning: What's Next? (2026)  ") == (
        "ai-machine-learning-what-s-next-2026"
    )
    assert normalize_slug("---") == ""
    assert normalize_slug(None) == ""


def test_normalize_slug_truncates_to_90_chars():
    slug = normalize_slug("word " * 40)
    assert len(slug) == 90


def test_build_external_id_normalizes_local_id():
    assert build_external_id("whonews", "https://www.who.int/news/item/05-02-2024-X") == (
        "whonews:https-www-who-int-news-item-05-02-2024-x"
    )
    assert build_external_id("pubmed", "38211234") == "pubmed:38211234"


def test_normalize_date_rfc822():
    assert normalize_date("Mon, 05 Feb 2024 10:00:00 GMT", TODAY) == "2024-02-05"


def test_normalize_date_converts_offsets_to_utc():
    assert normalize_date("2024-02-05T23:30:00-05:00", TODAY) == "2024-02-06"


def test_normalize_date_iso_and_partial():
    assert normalize_date("2024-02-05", TODAY) == "2024-02-05"
    assert normalize_date("2024-03", TODAY) == "2024-03-01"
    assert normalize_date("2023", TODAY) == "2023-01-01"


def test_normalize_date_long_form():
    assert normalize_date("February 5, 2024", TODAY) == "2024-02-05"


def test_normalize_date_unparsable_maps_to_today():
    assert normalize_date("sometime soon", TODAY) == "2026-03-14"
    assert normalize_date("", TODAY) == "2026-03-14"
    assert normalize_date(None, TODAY) == "2026-03-14"
    assert normalize_date("2024-13-45", TODAY) == "2026-03-14"


def test_strip_html_handles_cdata_and_entities():
    raw = "<![CDATA[<p>Sleep &amp; <b>circadian</b>\n rhythms</p>]]>"
    assert strip_html(raw) == "Sleep & circadian rhythms"


def test_infer_source_type_and_quality():
    title = "Early results from a randomized clinical trial of exercise and metabolic health"
    assert infer_source_type(title) == "clinical_trial"
    assert infer_evidence_quality(title) == "rct"
    assert infer_source_type("A systematic review of fasting") == "review"
    assert infer_evidence_quality("Protein intake: a meta-analysis") == "meta_analysis"
    assert infer_source_type("Cohort study of frailty") == "research_paper"
    assert infer_evidence_quality("Cohort study of frailty") == "observational"


def test_slug_registry_keeps_first_slug_and_suffixes_collisions():
    registry = SlugRegistry(["sleep-and-aging"])
    slug = registry.allocate("Sleep and Aging", "whonews:abc")
    assert slug == f"sleep-and-aging-{short_hash('whonews:abc')}"
    assert registry.allocate("Fasting basics", "whonews:def") == "fasting-basics"
    assert "fasting-basics" in registry


def test_slug_registry_is_deterministic_and_unique():
    titles = ["Same title"] * 5
    slugs_a = [SlugRegistry().allocate(t, f"x:{i}") for i, t in enumerate(titles)]
    assert set(slugs_a) == {"same-title"}

    registry = SlugRegistry()
    slugs = [registry.allocate("Same title", "x:1") for _ in range(3)]
    assert len(set(slugs)) == 3
    assert all(len(s) <= 90 for s in slugs)


def test_slug_registry_suffix_respects_length_cap():
    long_title = "longevity " * 20
    registry = SlugRegistry([normalize_slug(long_title)])
    slug = registry.allocate(long_title, "nihnews:item")
    assert len(slug) <= 90
    assert slug.endswith(short_hash("nihnews:item"))


def test_normalize_date_partial_text_dates_use_first_day():
    assert normalize_date("February 2024", TODAY) == "2024-02-01"
    assert normalize_date("Feb 2024", TODAY) == "2024-02-01"
    assert normalize_date("2024/03", TODAY) == "2024-03-01"

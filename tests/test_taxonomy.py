"""Tests for keyword-based category classification."""

from longevity_feed.core.taxonomy import TAXONOMY, classify


def _slugs(text):
    return [c.slug for c in classify(text)]


def test_taxonomy_order_is_fixed():
    assert [c.slug for c in TAXONOMY] == [
        "exercise",
        "sleep",
        "nutrition",
        "metabolic-health",
        "cellular-health",
        "healthspan",
    ]


def test_classify_takes_first_two_matches_in_table_order():
    title = "Early results from a randomized clinical trial of exercise and metabolic health"
    assert _slugs(title) == ["exercise", "metabolic-health"]


def test_classify_sleep_title():
    assert "sleep" in _slugs("Study links afternoon sun exposure to better sleep quality")


def test_classify_ignores_hit_frequency():
    text = "Longevity, longevity, longevity and aging; one mention of protein"
    assert _slugs(text) == ["nutrition", "healthspan"]


def test_classify_is_case_insensitive():
    assert _slugs("VO2 MAX and Circadian timing") == ["exercise", "sleep"]


def test_classify_defaults_to_healthspan():
    categories = classify("Quarterly staffing update for the agency")
    assert [c.slug for c in categories] == ["healthspan"]
    assert categories[0].to_dict() == {
        "slug": "healthspan",
        "name": "Healthspan",
        "description": "Strategies that improve quality years, not only lifespan.",
    }

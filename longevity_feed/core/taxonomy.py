"""
Heuristic topic classification against the fixed category taxonomy.

Categories are tested in table order and a match is plain substring
existence, so the first two matching categories win regardless of how
often their keywords occur.
"""

from __future__ import annotations

from .types import Category


TAXONOMY: tuple[Category, ...] = (
    Category(
        "exercise",
        "Exercise",
        "Movement, training, and performance-related longevity insights.",
        ("exercise", "training", "vo2", "aerobic", "muscle", "strength"),
    ),
    Category(
        "sleep",
        "Sleep",
        "Sleep quality, rhythms, and recovery-focused findings.",
        ("sleep", "circadian"),
    ),
    Category(
        "nutrition",
        "Nutrition",
        "Dietary patterns and nutrition interventions for longevity.",
        ("diet", "nutrition", "protein", "fasting"),
    ),
    Category(
        "metabolic-health",
        "Metabolic Health",
        "Insulin, glucose, lipid, and body-composition driven research.",
        ("metabolic", "insulin", "glucose", "prediabetes"),
    ),
    Category(
        "cellular-health",
        "Cellular Health",
        "Cell-level mechanisms influencing aging and resilience.",
        ("cell", "mitochond", "inflammation", "nad"),
    ),
    Category(
        "healthspan",
        "Healthspan",
        "Strategies that improve quality years, not only lifespan.",
        ("healthspan", "frailty", "aging", "longevity", "preventive", "prevention"),
    ),
)

DEFAULT_CATEGORY = TAXONOMY[-1]
MAX_CATEGORIES = 2


def classify(text: str) -> list[Category]:
    """Assign up to two taxonomy categories to a piece of text.

    Args:
        text: Title and abstract, concatenated

    Returns:
        The first two matching categories in taxonomy order, or the
        default Healthspan category when nothing matches
    """
    lowered = (text or "").lower()
    matches = [
        category
        for category in TAXONOMY
        if any(keyword in lowered for keyword in category.keywords)
    ]
    return matches[:MAX_CATEGORIES] or [DEFAULT_CATEGORY]

"""
Pure normalizers shared by source adapters and the merge stage.

Dates, identities, and slugs from every source pass through these functions
so that records from incompatible wire formats compare and sort uniformly.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
import html
import re

from dateutil import parser as date_parser


SLUG_MAX_CHARS = 90

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_YEAR_RE = re.compile(r"^(\d{4})$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def normalize_slug(value: str | None) -> str:
    """Convert text to a URL-safe slug.

    Args:
        value: The text to slugify

    Returns:
        A lowercase, hyphenated slug limited to 90 characters; may be empty
    """
    slug = _NON_ALNUM_RE.sub("-", str(value or "").lower())
    return slug.strip("-")[:SLUG_MAX_CHARS]


def build_external_id(source_key: str, local_id: str) -> str:
    """Build the dedup key for a source-native identifier."""
    return f"{source_key}:{normalize_slug(local_id)}"


def normalize_date(value: str | None, today: date | None = None) -> str:
    """Normalize a date string to YYYY-MM-DD.

    Accepts RFC-822 ("Mon, 05 Feb 2024 10:00:00 GMT"), ISO dates and
    datetimes, long-form dates ("February 5, 2024") and partial dates
    ("2024", "2024-03"). Timezone-aware values are converted to UTC.

    Args:
        value: Raw date string from a source
        today: Date returned when the input cannot be parsed (defaults to today, UTC)

    Returns:
        Canonical YYYY-MM-DD string; never raises
    """
    run_date = today or datetime.now(timezone.utc).date()
    fallback = run_date.isoformat()
    text = (value or "").strip()
    if not text:
        return fallback

    match = _ISO_DATE_RE.match(text)
    if match:
        return _checked(int(match.group(1)), int(match.group(2)), int(match.group(3)), fallback)
    match = _YEAR_MONTH_RE.match(text)
    if match:
        return _checked(int(match.group(1)), int(match.group(2)), 1, fallback)
    match = _YEAR_RE.match(text)
    if match:
        return _checked(int(match.group(1)), 1, 1, fallback)

    try:
        # Parts missing from the input ("February 2024") become 01, not today's values
        parsed = date_parser.parse(text, default=datetime(run_date.year, 1, 1))
    except (ValueError, OverflowError):
        return fallback
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def _checked(year: int, month: int, day: int, fallback: str) -> str:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return fallback


def strip_html(value: str | None) -> str:
    """Unwrap CDATA, drop markup, decode entities and collapse whitespace."""
    text = _CDATA_RE.sub(r"\1", str(value or ""))
    text = html.unescape(_TAG_RE.sub(" ", text))
    # Entity-encoded markup only becomes visible after unescaping
    text = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def infer_source_type(title: str) -> str:
    t = title.lower()
    if "trial" in t:
        return "clinical_trial"
    if "review" in t or "meta" in t:
        return "review"
    return "research_paper"


def infer_evidence_quality(title: str) -> str:
    t = title.lower()
    if "randomized" in t:
        return "rct"
    if "meta-analysis" in t or "meta analysis" in t:
        return "meta_analysis"
    if "review" in t:
        return "review"
    return "observational"

"""Parsing of generation-service responses into Enrichment fields."""

from __future__ import annotations

import json
from typing import Any

from ..core.types import Enrichment, RawCandidate


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse a model response that should contain a single JSON object.

    Tolerates fenced code blocks and prose around the object.

    Raises:
        json.JSONDecodeError: If no JSON object can be recovered
    """
    if not content or not content.strip():
        raise json.JSONDecodeError("Empty content", content or "", 0)
    try:
        obj = json.loads(content)
    except json.JSONDecodeError:
        obj = json.loads(_extract_json_snippet(content))
    if not isinstance(obj, dict):
        raise json.JSONDecodeError("Expected a JSON object", content, 0)
    return obj


def _extract_json_snippet(content: str) -> str:
    fence = _extract_fenced_json(content)
    if fence:
        return fence
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise json.JSONDecodeError("No JSON object found", content, 0)
    return content[start : end + 1]


def _extract_fenced_json(content: str) -> str | None:
    lines = content.splitlines()
    start_idx = None
    for idx, line in enumerate(lines):
        if line.strip().startswith("```") and "json" in line.lower():
            start_idx = idx + 1
            break
    if start_idx is None:
        return None
    for idx in range(start_idx, len(lines)):
        if lines[idx].strip().startswith("```"):
            snippet = "\n".join(lines[start_idx:idx]).strip()
            return snippet or None
    return None


def to_enrichment(obj: dict[str, Any], candidate: RawCandidate, summary_chars: int) -> Enrichment:
    """Map a parsed response onto Enrichment, accepting camelCase or snake_case keys."""
    explanation = _pick(obj, "laymansExplanation", "laymans_explanation")
    takeaways = _pick(obj, "keyTakeaways", "key_takeaways")
    summary = _pick(obj, "technicalSummary", "technical_summary")

    if not isinstance(takeaways, list):
        takeaways = []
    return Enrichment(
        laymans_explanation=str(explanation or "").strip(),
        key_takeaways=[str(t).strip() for t in takeaways if str(t).strip()],
        technical_summary=str(summary or "").strip() or candidate.abstract[:summary_chars],
    )


def _pick(obj: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = obj.get(key)
        if value:
            return value
    return None

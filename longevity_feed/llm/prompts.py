"""Prompt loading and rendering helpers for enrichment providers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..core.types import RawCandidate


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_enrichment_prompt(candidate: RawCandidate) -> str:
    return _render_template(
        "enrichment",
        title=candidate.title,
        abstract=candidate.abstract,
    )

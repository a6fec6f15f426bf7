"""Slug allocation that keeps record slugs unique across the corpus."""

from __future__ import annotations

import hashlib
from typing import Iterable

from .normalize import SLUG_MAX_CHARS, normalize_slug


def short_hash(value: str) -> str:
    """Return first 5 characters of the MD5 hash of value.

    Args:
        value: The text to hash

    Returns:
        First 5 characters of the MD5 hash (hexadecimal)
    """
    return hashlib.md5(value.encode("utf-8")).hexdigest()[:5]


class SlugRegistry:
    """Tracks slugs already in use and hands out collision-free ones.

    Colliding slugs get a suffix derived from the record's external id, so
    the same record always receives the same slug for a given corpus.
    """

    def __init__(self, used: Iterable[str] = ()):
        self._used: set[str] = {slug for slug in used if slug}

    def __contains__(self, slug: str) -> bool:
        return slug in self._used

    def allocate(self, title: str, external_id: str) -> str:
        """Reserve and return a unique slug for a record.

        Args:
            title: Record title the slug is derived from
            external_id: Record dedup key, used to disambiguate collisions

        Returns:
            A slug not previously handed out or seeded into the registry
        """
        base = normalize_slug(title) or normalize_slug(external_id) or "article"
        slug = base
        if slug in self._used:
            suffix = short_hash(external_id)
            slug = _with_suffix(base, suffix)
            counter = 2
            while slug in self._used:
                slug = _with_suffix(base, f"{suffix}-{counter}")
                counter += 1
        self._used.add(slug)
        return slug


def _with_suffix(base: str, suffix: str) -> str:
    head = base[: SLUG_MAX_CHARS - len(suffix) - 1].rstrip("-")
    return f"{head}-{suffix}"

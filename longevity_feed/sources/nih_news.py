"""NIH news-release listing, scraped from the public HTML page."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
import httpx

from ..core.normalize import build_external_id, normalize_date, strip_html
from ..core.types import RawCandidate
from .base import SourceAdapter


_MONTHS = (
    "January|February|March|April|May|June|July|"
    "August|September|October|November|December"
)
# Card text is the headline, then "Month D, YYYY", a dash, and a teaser
_DATE_RE = re.compile(rf"\b(?:{_MONTHS})\s+\d{{1,2}},\s+\d{{4}}\b")
_HEADLINE_SPLIT_RE = re.compile(rf"\s+\b(?:{_MONTHS})\b\s+\d{{1,2}},\s+\d{{4}}\s+(?:—|–|-)\s+")


class NihNewsSource(SourceAdapter):
    """National Institutes of Health news releases."""

    key = "nihnews"
    name = "NIH News"
    base_url = "https://www.nih.gov"
    url = "https://www.nih.gov/news-events/news-releases"
    path_prefix = "/news-events/news-releases/"
    max_items = 12
    min_text_chars = 20

    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        page = await self.get_text(client, self.url)
        return self.parse_listing(page)

    def parse_listing(self, page: str) -> list[RawCandidate]:
        soup = BeautifulSoup(page, "html.parser")
        items: list[RawCandidate] = []
        seen_paths: set[str] = set()

        for anchor in soup.find_all("a", href=True):
            if len(items) >= self.max_items:
                break
            path = self._release_path(anchor["href"])
            if path is None:
                continue
            text = strip_html(anchor.get_text(" "))
            if len(text) < self.min_text_chars:
                continue
            if path in seen_paths:
                continue
            seen_paths.add(path)

            headline = _HEADLINE_SPLIT_RE.split(text, maxsplit=1)[0].strip()
            date_match = _DATE_RE.search(text)
            items.append(
                RawCandidate(
                    external_id=build_external_id(self.key, path),
                    title=headline or text,
                    abstract=text,
                    source_name=self.name,
                    source_url=urljoin(self.base_url, path),
                    source_type="news",
                    evidence_quality="editorial",
                    published_date=normalize_date(
                        date_match.group(0) if date_match else None, self.today
                    ),
                )
            )
        return items

    def _release_path(self, href: str) -> str | None:
        parsed = urlparse(href)
        if parsed.netloc and parsed.netloc not in ("nih.gov", "www.nih.gov"):
            return None
        if not parsed.path.startswith(self.path_prefix) or parsed.path == self.path_prefix:
            return None
        return parsed.path

"""RSS/Atom feed sources, parsed with feedparser."""

from __future__ import annotations

from datetime import date

import feedparser
import httpx

from ..core.normalize import build_external_id, normalize_date, strip_html
from ..core.types import RawCandidate
from .base import SourceAdapter, SourceError


def parse_rss_items(
    xml: str,
    source_key: str,
    source_name: str,
    source_type: str = "news",
    evidence_quality: str = "editorial",
    today: date | None = None,
) -> list[RawCandidate]:
    """Parse an RSS document into candidates.

    Items without a title or link are skipped. The identity comes from the
    guid, then the link, then the title; the description becomes the
    abstract, or the title when the description is empty.

    Raises:
        SourceError: If the document is not a feed at all
    """
    feed = feedparser.parse(xml)
    if feed.get("bozo") and not feed.entries:
        raise SourceError(f"{source_key}: unparsable feed ({feed.get('bozo_exception')})", "parse")

    items: list[RawCandidate] = []
    for entry in feed.entries:
        title = strip_html(entry.get("title"))
        link = strip_html(entry.get("link"))
        if not title or not link:
            continue
        guid = strip_html(entry.get("id"))
        description = strip_html(entry.get("summary") or entry.get("description"))
        items.append(
            RawCandidate(
                external_id=build_external_id(source_key, guid or link or title),
                title=title,
                abstract=description or title,
                source_name=source_name,
                source_url=link,
                source_type=source_type,
                evidence_quality=evidence_quality,
                published_date=normalize_date(
                    entry.get("published") or entry.get("updated"), today
                ),
            )
        )
    return items


class WhoNewsSource(SourceAdapter):
    """World Health Organization English news feed."""

    key = "whonews"
    name = "WHO News"
    url = "https://www.who.int/rss-feeds/news-english.xml"
    max_items = 10

    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        xml = await self.get_text(client, self.url)
        items = parse_rss_items(
            xml,
            source_key=self.key,
            source_name=self.name,
            source_type="news",
            evidence_quality="editorial",
            today=self.today,
        )
        return items[: self.max_items]

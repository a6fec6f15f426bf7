"""PubMed literature search via NCBI E-utilities."""

from __future__ import annotations

import asyncio
import logging
import warnings

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
import httpx

from ..core.normalize import (
    build_external_id,
    infer_evidence_quality,
    infer_source_type,
    normalize_date,
    strip_html,
)
from ..core.types import RawCandidate
from .base import SourceAdapter, SourceError

logger = logging.getLogger(__name__)

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


class PubMedSource(SourceAdapter):
    """Most recent PubMed records matching the configured keywords.

    Ids come from a JSON esearch call; each id is then fetched as XML.
    A record whose efetch fails is skipped without failing the source.
    """

    key = "pubmed"
    name = "PubMed"
    search_url = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"
    fetch_url = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"

    async def fetch_candidates(self, client: httpx.AsyncClient) -> list[RawCandidate]:
        ids = await self.search_ids(client)
        results = await asyncio.gather(*(self.fetch_details(client, pmid) for pmid in ids))
        return [candidate for candidate in results if candidate is not None]

    async def search_ids(self, client: httpx.AsyncClient) -> list[str]:
        data = await self.get_json(
            client,
            self.search_url,
            params={
                "db": "pubmed",
                "term": " OR ".join(self.cfg.keywords),
                "retmode": "json",
                "retmax": self.cfg.page_size,
                "sort": "pub date",
            },
        )
        try:
            ids = data["esearchresult"]["idlist"]
        except (KeyError, TypeError) as exc:
            raise SourceError(f"{self.key}: esearch response without idlist", "parse") from exc
        return [str(pmid) for pmid in ids]

    async def fetch_details(self, client: httpx.AsyncClient, pmid: str) -> RawCandidate | None:
        try:
            xml = await self.get_text(
                client,
                self.fetch_url,
                params={"db": "pubmed", "id": pmid, "retmode": "xml"},
            )
        except SourceError as exc:
            logger.warning("PubMed efetch failed for %s: %s", pmid, exc)
            return None
        return self.parse_article(pmid, xml)

    def parse_article(self, pmid: str, xml: str) -> RawCandidate | None:
        # html.parser lowercases tag names and needs no lxml; the XML-as-HTML
        # warning is expected for efetch payloads.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
            soup = BeautifulSoup(xml, "html.parser")
        title_tag = soup.find("articletitle")
        title = strip_html(title_tag.get_text(" ")) if title_tag else ""
        if not title:
            return None

        sections = [strip_html(tag.get_text(" ")) for tag in soup.find_all("abstracttext")]
        abstract = "\n\n".join(section for section in sections if section)

        journal_tag = soup.find("medlineta") or soup.find("title")
        journal = strip_html(journal_tag.get_text(" ")) if journal_tag else ""

        return RawCandidate(
            external_id=build_external_id(self.key, pmid),
            title=title,
            abstract=abstract,
            source_name=journal or "PubMed Source",
            source_url=f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/",
            source_type=infer_source_type(title),
            evidence_quality=infer_evidence_quality(title),
            published_date=self._pub_date(soup),
        )

    def _pub_date(self, soup: BeautifulSoup) -> str:
        pub_date = soup.find("pubdate")
        if pub_date is None:
            return normalize_date(None, self.today)

        year_tag = pub_date.find("year")
        if year_tag is None:
            # e.g. <MedlineDate>2024 Jan-Feb</MedlineDate>
            medline = pub_date.find("medlinedate")
            year = medline.get_text(strip=True)[:4] if medline else ""
            return normalize_date(year, self.today)

        month_tag = pub_date.find("month")
        day_tag = pub_date.find("day")
        month = _month_number(month_tag.get_text(strip=True) if month_tag else "")
        day = day_tag.get_text(strip=True) if day_tag else "1"
        year = year_tag.get_text(strip=True)
        return normalize_date(f"{year}-{month:02d}-{int(day) if day.isdigit() else 1:02d}", self.today)


def _month_number(value: str) -> int:
    if value.isdigit():
        return int(value)
    return _MONTHS.get(value[:3].lower(), 1)

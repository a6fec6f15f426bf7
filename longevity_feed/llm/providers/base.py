"""
Abstract base class for enrichment providers.

New providers should inherit from EnrichmentProvider and implement
enrich. Providers backed by a remote service raise EnrichmentError on any
failure; the run is aborted rather than the item skipped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

from ...config import EnrichmentConfig, LoggingConfig
from ...core.types import Enrichment, RawCandidate
from ...utils.logging import log_event, redact_text, redact_value, truncate_text


class EnrichmentProvider(ABC):
    """Produces lay-language fields for one candidate at a time."""

    name: str = ""
    model: str = ""

    def __init__(
        self,
        enrich_cfg: EnrichmentConfig,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        self.enrich_cfg = enrich_cfg
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger

    @abstractmethod
    def enrich(self, candidate: RawCandidate) -> Enrichment:
        """Generate enrichment fields for a candidate.

        Args:
            candidate: The candidate to explain (title and abstract are used)

        Returns:
            Enrichment with explanation, takeaways and technical summary

        Raises:
            EnrichmentError: If the generation service fails or answers unusably
        """
        raise NotImplementedError

    def _log_llm_response(
        self,
        candidate: RawCandidate,
        status: str,
        content: str,
        prompt: str,
    ) -> None:
        if self.llm_logger is None:
            return
        detail = self.log_cfg.llm_log_detail
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": "llm_response",
            "status": status,
            "provider": self.name,
            "model": self.model,
            "external_id": candidate.external_id,
            "article_title": candidate.title,
            "article_url": redact_value(candidate.source_url, redaction),
        }
        if detail == "summary_only":
            payload["raw_response"] = ""
        elif detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
            payload["raw_response"] = truncate_text(redact_text(content, redaction))
        else:
            payload["raw_response"] = truncate_text(redact_text(content, redaction))
        log_event(self.llm_logger, "LLM response", **payload)

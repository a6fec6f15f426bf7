"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from ...config import EnrichmentConfig, LoggingConfig, ProviderConfig, get_model
from ...core.types import Enrichment, RawCandidate
from ...errors import EnrichmentError
from ..parsing import parse_json_response, to_enrichment
from ..prompts import build_enrichment_prompt
from .base import EnrichmentProvider


DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"


class OpenAICompatibleProvider(EnrichmentProvider):
    name = "openai"

    def __init__(
        self,
        cfg: ProviderConfig,
        enrich_cfg: EnrichmentConfig,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        if not api_key:
            raise ValueError("Missing OpenAI API key")
        super().__init__(enrich_cfg, log_cfg, llm_logger)
        self.cfg = cfg
        self.api_key = api_key
        self.model = get_model(cfg, DEFAULT_MODEL)
        self.base_url = (cfg.base_url or DEFAULT_BASE_URL).rstrip("/")

    def enrich(self, candidate: RawCandidate) -> Enrichment:
        prompt = build_enrichment_prompt(candidate)
        payload = {
            "model": self.model,
            "temperature": self.cfg.temperature,
            "response_format": {"type": "json_object"},
            "messages": [{"role": "user", "content": prompt}],
        }
        content = ""
        try:
            data = self._post(payload)
            content = _extract_text(data)
            obj = parse_json_response(content)
        except httpx.HTTPStatusError as exc:
            self._log_llm_response(candidate, "provider_error", str(exc), prompt)
            raise EnrichmentError(
                f"LLM request failed: {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            self._log_llm_response(candidate, "provider_error", str(exc), prompt)
            raise EnrichmentError(f"LLM request failed: {type(exc).__name__}: {exc}") from exc
        except json.JSONDecodeError as exc:
            self._log_llm_response(candidate, "parse_error", content, prompt)
            raise EnrichmentError(f"LLM response is not a JSON object: {exc}") from exc

        self._log_llm_response(candidate, "ok", content, prompt)
        return to_enrichment(obj, candidate, self.enrich_cfg.summary_chars)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(f"{self.base_url}/chat/completions", headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""

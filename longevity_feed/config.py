"""
Run configuration for Longevity Feed.

Every setting has a default in one of the section dataclasses below, so
the pipeline runs without a config file. An optional YAML file overrides
individual keys per section; CLI flags are applied on top by cli.py.

Sections: provider, fetch, sources, dedup, enrichment, corpus, logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the text-generation provider.

    Attributes:
        name: Provider name ("openai" or "gemini")
        model: Model identifier; falls back to OPENAI_MODEL, then the provider default
        api_key: Optional inline API key (overrides env var)
        api_key_env: Optional environment variable name containing the API key
        base_url: Optional base URL override for the provider API
        temperature: Sampling temperature sent with every request
        timeout_seconds: Request timeout for generation calls
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openai"
    model: str | None = None
    api_key: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    temperature: float = 0.2
    timeout_seconds: float = 60.0
    trust_env: bool = True


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching of upstream sources.

    Attributes:
        concurrency: Maximum number of sources fetched at the same time
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    concurrency: int = 4
    timeout_seconds: float = 30.0
    trust_env: bool = True
    user_agent: str = "longevity-feed/0.1 (+https://github.com/longevity-feed)"


@dataclass
class SourcesConfig:
    """Configuration for the active source set.

    Attributes:
        enabled: Source keys to fetch, in priority order
        per_source_limit: Maximum candidates taken from each source per run
        page_size: Page size for paginated JSON APIs
        max_pages: Maximum pages requested from paginated JSON APIs
        lookback_days: Date window for sources queried by interval
        keywords: Search terms for query-based sources
    """

    enabled: list[str] = field(default_factory=lambda: ["nihnews", "whonews"])
    per_source_limit: int = 6
    page_size: int = 8
    max_pages: int = 1
    lookback_days: int = 30
    keywords: list[str] = field(
        default_factory=lambda: [
            "longevity",
            "aging",
            "healthspan",
            "senolytics",
            "metabolic health",
        ]
    )


@dataclass
class DedupConfig:
    """Configuration for candidate deduplication.

    Attributes:
        fuzzy_titles: Also drop candidates whose title is near-identical to a known title
        title_similarity_threshold: Fuzzy match threshold (0-100) for title similarity
    """

    fuzzy_titles: bool = False
    title_similarity_threshold: int = 92


@dataclass
class EnrichmentConfig:
    """Configuration for the enrichment stage.

    Attributes:
        batch_size: Maximum number of candidates enriched per run
        summary_chars: Abstract length used for the fallback technical summary
        excerpt_chars: Length of the excerpt cut from the technical summary
        max_takeaways: Maximum number of key takeaways kept per record
    """

    batch_size: int = 10
    summary_chars: int = 700
    excerpt_chars: int = 220
    max_takeaways: int = 5


@dataclass
class CorpusConfig:
    """Configuration for the persisted corpus.

    Attributes:
        path: Location of the corpus JSON file
        max_records: Maximum number of records kept after a merge
    """

    path: str = "data/articles.json"
    max_records: int = 200


@dataclass
class LoggingConfig:
    """Run and LLM logging settings.

    Attributes:
        level: Threshold for both loggers ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether run logs are echoed to the terminal through Rich
        directory: Directory for log files; file logging is off when unset
        format: Run log file format, "jsonl" or "plain"
        filename: Run log file name inside directory
        llm_log_enabled: Whether generation responses get their own log file
        llm_log_detail: "summary_only", "response_only" or "prompt_response"
        llm_log_redaction: "none", "redact_content" or "redact_urls"
        llm_log_file: LLM log file name inside directory
    """

    level: str = "INFO"
    console: bool = True
    directory: str | None = None
    format: str = "jsonl"
    filename: str = "ingest.jsonl"
    llm_log_enabled: bool = True
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_DEFAULT_KEY_ENVS = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}


def load_config(path: str | Path | None) -> AppConfig:
    """Build an AppConfig from defaults and an optional YAML file.

    Unknown sections and keys in the file are ignored.

    Raises:
        ValueError: If the file does not hold a mapping at the top level
    """
    cfg = AppConfig()
    if not path:
        return cfg

    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping of sections")

    for section in fields(AppConfig):
        overrides = raw.get(section.name)
        if isinstance(overrides, dict):
            current = getattr(cfg, section.name)
            setattr(cfg, section.name, _apply_overrides(current, overrides))
    return cfg


def _apply_overrides(section: Any, overrides: dict[str, Any]) -> Any:
    known = {f.name for f in fields(section)}
    return replace(section, **{k: v for k, v in overrides.items() if k in known})


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Resolve the provider credential.

    Order: inline api_key, then the variable named by api_key_env, then the
    provider's conventional variable (OPENAI_API_KEY or GOOGLE_API_KEY).
    """
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    env_name = _DEFAULT_KEY_ENVS.get(cfg.name.lower(), "OPENAI_API_KEY")
    return os.getenv(env_name)


def get_model(cfg: ProviderConfig, default: str) -> str:
    """Pick the model: inline config, then OPENAI_MODEL for openai, then default."""
    if cfg.model:
        return cfg.model
    if cfg.name.lower() == "openai":
        return os.getenv("OPENAI_MODEL") or default
    return default

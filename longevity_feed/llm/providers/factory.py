"""Provider factory and registry for hot-swappable generation backends."""

from __future__ import annotations

from ...config import EnrichmentConfig, LoggingConfig, ProviderConfig, get_api_key
from .base import EnrichmentProvider
from .fallback import TemplateProvider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider


ProviderBuilder = type[EnrichmentProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "gemini": GeminiProvider,
    "openai": OpenAICompatibleProvider,
    "openai_compatible": OpenAICompatibleProvider,
    "openai-compatible": OpenAICompatibleProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(
    provider_cfg: ProviderConfig,
    enrich_cfg: EnrichmentConfig,
    log_cfg: LoggingConfig,
    llm_logger,
) -> EnrichmentProvider:
    """Build a provider instance from runtime config.

    Without a credential the deterministic TemplateProvider is returned
    instead of a remote provider.
    """
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    api_key = get_api_key(provider_cfg)
    if not api_key:
        return TemplateProvider(enrich_cfg, log_cfg, llm_logger)
    return builder(provider_cfg, enrich_cfg, api_key, log_cfg, llm_logger)

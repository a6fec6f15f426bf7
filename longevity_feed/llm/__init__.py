"""Enrichment providers for lay-language summaries."""

from .providers.base import EnrichmentProvider
from .providers.factory import available_providers, create_provider
from .providers.fallback import TemplateProvider
from .providers.gemini import GeminiProvider
from .providers.openai_compatible import OpenAICompatibleProvider

__all__ = [
    "EnrichmentProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "TemplateProvider",
    "create_provider",
    "available_providers",
]

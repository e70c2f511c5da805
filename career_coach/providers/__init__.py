"""AI provider implementations for the Career Coach system."""

from typing import Any, Dict, Optional

from ..utils.exceptions import ConfigurationError
from .anthropic_provider import AnthropicProvider
from .base import RemoteAIProvider, extract_json, normalize_questions
from .fallback_provider import FallbackProvider
from .gemini_provider import GeminiProvider
from .huggingface_provider import HuggingFaceProvider
from .openai_provider import OpenAIProvider

PROVIDER_CLASSES = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    GeminiProvider.name: GeminiProvider,
    HuggingFaceProvider.name: HuggingFaceProvider,
}


def create_provider(
    provider_name: str,
    api_key: Optional[str],
    settings: Optional[Dict[str, Any]] = None,
    propagate_errors: bool = False,
) -> RemoteAIProvider:
    """Instantiate a remote provider by name.

    Raises:
        ConfigurationError: If the name is not a supported remote provider.
    """
    provider_class = PROVIDER_CLASSES.get((provider_name or "").strip().lower())
    if provider_class is None:
        raise ConfigurationError(f"Unsupported provider: {provider_name}", config_key="provider")
    return provider_class(api_key, settings=settings, propagate_errors=propagate_errors)


__all__ = [
    "AnthropicProvider",
    "FallbackProvider",
    "GeminiProvider",
    "HuggingFaceProvider",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "RemoteAIProvider",
    "create_provider",
    "extract_json",
    "normalize_questions",
]

"""Construction of AI providers from API keys and configuration."""

from typing import Any, Dict, Optional

from ..providers import PROVIDER_CLASSES, create_provider
from ..utils.logging import get_logger
from .configuration_manager import ConfigurationManager
from .llm_manager import AIProvider, ProviderRegistry

logger = get_logger("provider_factory")


def create_ai_provider(
    api_keys: Optional[Dict[str, str]] = None,
    preferred_provider: Optional[str] = "huggingface",
    config: Optional[Dict[str, Any]] = None,
) -> AIProvider:
    """Build the provider an application should use.

    When ``preferred_provider`` names a supported provider that has a non-empty
    key, that single adapter is returned and it absorbs every failure into
    heuristic output. Otherwise a ``ProviderRegistry`` is returned, seeded with
    every supported provider that has a key and ending at the fallback.

    Args:
        api_keys: Provider name to API key
        preferred_provider: Provider to use on its own when it has a key
        config: Optional ``provider_order`` list and ``providers`` settings mapping

    Returns:
        A single provider or a registry; both implement ``AIProvider``.
    """
    config = config or {}
    provider_settings: Dict[str, Dict[str, Any]] = config.get("providers") or {}

    keys: Dict[str, str] = {}
    for provider_name, api_key in (api_keys or {}).items():
        normalized = (provider_name or "").strip().lower()
        if normalized not in PROVIDER_CLASSES:
            logger.warning(f"Ignoring API key for unsupported provider: {provider_name}")
            continue
        if api_key:
            keys[normalized] = api_key

    preferred = (preferred_provider or "").strip().lower()
    if preferred in keys:
        logger.info(f"Using {preferred} as the only AI provider")
        return create_provider(preferred, keys[preferred], settings=provider_settings.get(preferred))

    if preferred and preferred not in PROVIDER_CLASSES:
        logger.warning(f"Preferred provider {preferred_provider} is not supported")

    return ProviderRegistry(
        api_keys=keys,
        provider_order=config.get("provider_order"),
        provider_settings=provider_settings,
    )


def create_ai_provider_from_config(config_manager: ConfigurationManager) -> AIProvider:
    """Build a provider from loaded configuration."""
    return create_ai_provider(
        api_keys=config_manager.get_api_keys(),
        preferred_provider=config_manager.get_preferred_provider(),
        config={
            "provider_order": config_manager.get_provider_order(),
            "providers": config_manager.get_all_provider_settings(),
        },
    )

"""Career Coach: resume analysis, company research and mock interviews over pluggable AI providers."""

__version__ = "1.0.0"

from .services.llm_manager import AIProvider, ProviderRegistry
from .services.provider_factory import create_ai_provider, create_ai_provider_from_config
from .services.coaching_service import CoachingService

__all__ = [
    "AIProvider",
    "ProviderRegistry",
    "create_ai_provider",
    "create_ai_provider_from_config",
    "CoachingService",
    "__version__",
]

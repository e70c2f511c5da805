"""Service modules for the Career Coach system."""

from .llm_manager import AIProvider, ProviderRegistry, DEFAULT_PROVIDER_ORDER, FALLBACK_PROVIDER
from .storage_manager import StorageInterface, MemoryStorageManager, FileStorageManager, create_storage
from .configuration_manager import ConfigurationManager
from .coaching_service import CoachingService

__all__ = [
    "AIProvider",
    "ProviderRegistry",
    "DEFAULT_PROVIDER_ORDER",
    "FALLBACK_PROVIDER",
    "StorageInterface",
    "MemoryStorageManager",
    "FileStorageManager",
    "create_storage",
    "ConfigurationManager",
    "CoachingService",
]

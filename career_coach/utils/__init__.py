"""Utility modules for the Career Coach system."""

from .logging import (
    setup_logging,
    get_logger,
    set_correlation_id,
    get_correlation_id,
    log_performance,
    redact,
    register_secrets,
)
from .exceptions import (
    CareerCoachError,
    ConfigurationError,
    LLMProviderError,
    AuthenticationError,
    RateLimitError,
    NetworkError,
    AllProvidersFailedError,
    StorageError,
    ResourceNotFoundError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "log_performance",
    "redact",
    "register_secrets",
    "CareerCoachError",
    "ConfigurationError",
    "LLMProviderError",
    "AuthenticationError",
    "RateLimitError",
    "NetworkError",
    "AllProvidersFailedError",
    "StorageError",
    "ResourceNotFoundError",
]

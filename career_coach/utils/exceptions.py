"""Custom exceptions for the Career Coach system."""

from typing import Optional, Any, Dict, List


class CareerCoachError(Exception):
    """Base exception for all Career Coach errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(CareerCoachError):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "CONFIG_ERROR", details)
        self.config_key = config_key


class LLMProviderError(CareerCoachError):
    """Exception raised for LLM provider-related errors."""

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "LLM_PROVIDER_ERROR",
    ):
        """Initialize the LLM provider error.

        Args:
            message: Error message
            provider_name: Optional name of the LLM provider that caused the error
            details: Optional additional error details
            error_code: Error code, overridden by subclasses
        """
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class AuthenticationError(LLMProviderError):
    """Raised when a provider rejects the configured API key."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, provider_name, details, error_code="AUTHENTICATION_ERROR")


class RateLimitError(LLMProviderError):
    """Exception raised for rate limiting errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, retry_after: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the rate limit error.

        Args:
            message: Error message
            provider_name: Optional name of the provider that hit rate limits
            retry_after: Optional seconds to wait before retrying
            details: Optional additional error details
        """
        super().__init__(message, provider_name, details, error_code="RATE_LIMIT_ERROR")
        self.retry_after = retry_after


class NetworkError(LLMProviderError):
    """Exception raised for network-related errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the network error.

        Args:
            message: Error message
            provider_name: Optional name of the provider being called
            url: Optional URL that caused the network error
            status_code: Optional HTTP status code
            details: Optional additional error details
        """
        super().__init__(message, provider_name, details, error_code="NETWORK_ERROR")
        self.url = url
        self.status_code = status_code


class AllProvidersFailedError(LLMProviderError):
    """Raised when every provider in a registry, fallback included, failed."""

    def __init__(self, message: str, failures: Optional[Dict[str, str]] = None):
        super().__init__(message, None, {"failures": failures or {}}, error_code="ALL_PROVIDERS_FAILED")
        self.failures = failures or {}

    @property
    def attempted_providers(self) -> List[str]:
        return list(self.failures)


class StorageError(CareerCoachError):
    """Exception raised for storage-related errors."""

    def __init__(self, message: str, file_path: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the storage error.

        Args:
            message: Error message
            file_path: Optional file path that caused the error
            details: Optional additional error details
        """
        super().__init__(message, "STORAGE_ERROR", details)
        self.file_path = file_path


class ResourceNotFoundError(CareerCoachError):
    """Exception raised when a requested resource is not found."""

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the resource not found error.

        Args:
            message: Error message
            resource_type: Optional type of resource that was not found
            resource_id: Optional ID of resource that was not found
            details: Optional additional error details
        """
        super().__init__(message, "RESOURCE_NOT_FOUND_ERROR", details)
        self.resource_type = resource_type
        self.resource_id = resource_id

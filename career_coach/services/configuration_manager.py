"""Configuration Manager for handling application configuration and settings."""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from ..models.enums import ProviderName
from ..utils.exceptions import ConfigurationError
from ..utils.logging import get_logger, register_secrets
from .llm_manager import DEFAULT_PROVIDER_ORDER

ENV_API_KEYS = {
    ProviderName.OPENAI.value: "OPENAI_API_KEY",
    ProviderName.ANTHROPIC.value: "ANTHROPIC_API_KEY",
    ProviderName.GEMINI.value: "GEMINI_API_KEY",
    ProviderName.HUGGINGFACE.value: "HUGGINGFACE_API_KEY",
}

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _split_names(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v).strip().lower() for v in value if str(v).strip()]


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Root log level")
    structured: bool = Field(default=False, description="Emit JSON log lines")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size: int = Field(default=10 * 1024 * 1024, description="Rotate after this many bytes")
    backup_count: int = Field(default=5, description="Rotated files to keep")
    console_output: bool = Field(default=True, description="Log to stderr")
    file_output: bool = Field(default=False, description="Log to file_path")

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v):
        level = str(v or "INFO").upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class StorageConfig(BaseModel):
    """Storage configuration settings."""

    backend: str = Field(default="memory", description="memory or file")
    base_path: str = Field(default="data", description="Directory used by the file backend")

    @field_validator("backend", mode="before")
    @classmethod
    def validate_backend(cls, v):
        backend = str(v or "memory").lower()
        if backend not in ("memory", "file"):
            raise ValueError(f"Unknown storage backend: {v}")
        return backend


class ProviderSettings(BaseModel):
    """Settings for one AI provider."""

    api_key: SecretStr = Field(default=SecretStr(""), description="API key for the provider")
    base_url: Optional[str] = Field(default=None, description="Base URL for API calls")
    model: Optional[str] = Field(default=None, description="Model name to use")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_tokens: Optional[int] = Field(default=None, description="Maximum tokens for responses")
    temperature: Optional[float] = Field(default=None, description="Temperature for generation")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v):
        if v is not None and not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        return v

    def to_settings(self) -> Dict[str, Any]:
        """Provider constructor settings, without the API key."""
        return self.model_dump(exclude={"api_key"}, exclude_none=True)


class AIConfig(BaseModel):
    """Provider selection settings."""

    preferred_provider: str = Field(default=ProviderName.HUGGINGFACE.value, description="Single provider to use when keyed")
    provider_order: List[str] = Field(default_factory=lambda: list(DEFAULT_PROVIDER_ORDER), description="Registry priority order")

    @field_validator("preferred_provider", mode="before")
    @classmethod
    def normalize_preferred(cls, v):
        return str(v or "").strip().lower()

    @field_validator("provider_order", mode="before")
    @classmethod
    def normalize_order(cls, v):
        return _split_names(v)


class AppConfig(BaseModel):
    """Main application configuration model."""

    app_name: str = Field(default="Career Coach", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment")

    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Storage settings")
    ai: AIConfig = Field(default_factory=AIConfig, description="Provider selection")
    providers: Dict[str, ProviderSettings] = Field(default_factory=dict, description="Per-provider settings")

    class Config:
        validate_assignment = True


class ConfigurationManager:
    """Manages application configuration and settings.

    Sources, lowest precedence first: built-in defaults, ``config.yaml`` in
    ``config_path``, then environment variables (optionally loaded from
    ``env_file``).
    """

    def __init__(self, config_path: str = "config", env_file: str = ".env"):
        """Initialize the configuration manager.

        Args:
            config_path: Path to configuration directory.
            env_file: Path to environment file.
        """
        self.config_path = Path(config_path)
        self.env_file = Path(env_file)
        self.config: Optional[AppConfig] = None
        self.logger = get_logger("configuration_manager")

    def initialize(self) -> None:
        """Load environment, configuration file and overrides."""
        self._load_environment_variables()
        config_data = self._load_configuration_files()
        self._apply_environment_overrides(config_data)

        try:
            self.config = AppConfig.model_validate(config_data)
        except ValidationError as e:
            self.logger.warning(f"Invalid configuration, using defaults: {e}")
            self.config = AppConfig()
            self._apply_environment_overrides_to(self.config)

        register_secrets(self.get_api_keys().values())
        self._validate_configuration()
        self.logger.info("ConfigurationManager initialized successfully")

    def _load_environment_variables(self) -> None:
        """Load environment variables from .env file."""
        if self.env_file.exists():
            load_dotenv(self.env_file)
            self.logger.info(f"Loaded environment variables from {self.env_file}")

    def _load_configuration_files(self) -> Dict[str, Any]:
        """Load config.yaml from the configuration directory."""
        main_config_file = self.config_path / "config.yaml"
        if not main_config_file.exists():
            self.logger.debug(f"No configuration file at {main_config_file}, using defaults")
            return {}

        config_data = self._substitute_env(self._load_yaml_file(main_config_file))
        if not isinstance(config_data, dict):
            self.logger.warning(f"Configuration file {main_config_file} is not a mapping, using defaults")
            return {}

        self.logger.info(f"Loaded main configuration from {main_config_file}")
        return config_data

    def _load_yaml_file(self, file_path: Path) -> Any:
        """Load YAML file content.

        Args:
            file_path: Path to YAML file.

        Returns:
            Parsed content, or an empty dict when the file cannot be read.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.warning(f"Failed to load YAML file {file_path}: {str(e)}")
            return {}

    def _substitute_env(self, value: Any) -> Any:
        """Replace ``${VAR}`` references in string values."""
        if isinstance(value, str):
            return _ENV_REFERENCE.sub(lambda m: os.getenv(m.group(1), ""), value)
        if isinstance(value, dict):
            return {k: self._substitute_env(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._substitute_env(v) for v in value]
        return value

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> None:
        providers = config_data.get("providers")
        if not isinstance(providers, dict):
            providers = {}
        config_data["providers"] = providers

        for provider_name, env_var_name in ENV_API_KEYS.items():
            api_key = os.getenv(env_var_name)
            if api_key:
                section = providers.get(provider_name)
                if not isinstance(section, dict):
                    section = {}
                section["api_key"] = api_key
                providers[provider_name] = section

        ai_section = config_data.get("ai")
        if not isinstance(ai_section, dict):
            ai_section = {}
        if os.getenv("AI_PREFERRED_PROVIDER"):
            ai_section["preferred_provider"] = os.getenv("AI_PREFERRED_PROVIDER")
        if os.getenv("AI_PROVIDER_ORDER"):
            ai_section["provider_order"] = os.getenv("AI_PROVIDER_ORDER")
        config_data["ai"] = ai_section

        logging_section = config_data.get("logging")
        if not isinstance(logging_section, dict):
            logging_section = {}
        if os.getenv("LOG_LEVEL"):
            logging_section["level"] = os.getenv("LOG_LEVEL")
        config_data["logging"] = logging_section

        storage_section = config_data.get("storage")
        if not isinstance(storage_section, dict):
            storage_section = {}
        if os.getenv("STORAGE_BACKEND"):
            storage_section["backend"] = os.getenv("STORAGE_BACKEND")
        if os.getenv("STORAGE_PATH"):
            storage_section["base_path"] = os.getenv("STORAGE_PATH")
        config_data["storage"] = storage_section

    def _apply_environment_overrides_to(self, config: AppConfig) -> None:
        """Re-apply environment overrides on top of default configuration."""
        overrides: Dict[str, Any] = {}
        self._apply_environment_overrides(overrides)
        try:
            defaults = AppConfig.model_validate(overrides)
        except ValidationError as e:
            self.logger.warning(f"Ignoring invalid environment overrides: {e}")
            return
        config.providers = defaults.providers
        config.ai = defaults.ai
        config.logging = defaults.logging
        config.storage = defaults.storage

    def _validate_configuration(self) -> None:
        config = self.get_config()
        if not self.get_api_keys():
            self.logger.warning("No AI provider keys configured, heuristic fallback will answer every request")
        for provider_name in config.providers:
            if provider_name not in ENV_API_KEYS:
                self.logger.warning(f"Ignoring settings for unsupported provider: {provider_name}")

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Returns:
            Current application configuration.

        Raises:
            ConfigurationError: If configuration is not loaded.
        """
        if not self.config:
            raise ConfigurationError("Configuration not loaded")
        return self.config

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration setting.

        Args:
            key: Configuration key (dot notation supported).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        if not self.config:
            return default

        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            elif isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                return default
        return value

    def get_api_keys(self) -> Dict[str, str]:
        """Plain-text API keys for supported providers that have one."""
        keys = {}
        for provider_name, settings in self.get_config().providers.items():
            if provider_name not in ENV_API_KEYS:
                continue
            api_key = settings.api_key.get_secret_value()
            if api_key:
                keys[provider_name] = api_key
        return keys

    def get_provider_settings(self, provider_name: str) -> Dict[str, Any]:
        settings = self.get_config().providers.get(provider_name)
        return settings.to_settings() if settings else {}

    def get_all_provider_settings(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: settings.to_settings()
            for name, settings in self.get_config().providers.items()
            if name in ENV_API_KEYS
        }

    def get_preferred_provider(self) -> str:
        return self.get_config().ai.preferred_provider

    def get_provider_order(self) -> List[str]:
        return list(self.get_config().ai.provider_order)

    def get_logging_config(self) -> Dict[str, Any]:
        """Keyword arguments for ``setup_logging``."""
        logging_config = self.get_config().logging
        return {
            "level": logging_config.level,
            "log_file": logging_config.file_path,
            "enable_console": logging_config.console_output,
            "enable_file": logging_config.file_output and bool(logging_config.file_path),
            "structured": logging_config.structured,
            "max_file_size": logging_config.max_file_size,
            "backup_count": logging_config.backup_count,
        }

    def get_storage_config(self) -> Dict[str, Any]:
        storage_config = self.get_config().storage
        return {"backend": storage_config.backend, "base_path": storage_config.base_path}

    def get_configuration_summary(self) -> Dict[str, Any]:
        """Summary safe to print; API keys are reduced to presence flags."""
        config = self.get_config()
        return {
            "app_name": config.app_name,
            "version": config.version,
            "environment": config.environment,
            "preferred_provider": config.ai.preferred_provider,
            "provider_order": list(config.ai.provider_order),
            "providers": {
                name: {"configured": bool(settings.api_key.get_secret_value()), **settings.to_settings()}
                for name, settings in config.providers.items()
            },
            "storage": self.get_storage_config(),
            "log_level": config.logging.level,
        }

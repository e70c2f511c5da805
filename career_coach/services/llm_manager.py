"""AI provider interface and the priority-ordered provider registry."""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.company import CompanyInsight
from ..models.enums import ProviderName
from ..models.interview import InterviewQuestion, ResponseFeedback
from ..models.resume import ResumeAnalysis
from ..utils.exceptions import AllProvidersFailedError, ConfigurationError
from ..utils.logging import get_logger, log_performance

T = TypeVar("T")

FALLBACK_PROVIDER = ProviderName.FALLBACK.value
SUPPORTED_PROVIDERS = [p.value for p in ProviderName.remote()]
DEFAULT_PROVIDER_ORDER = [
    ProviderName.ANTHROPIC.value,
    ProviderName.OPENAI.value,
    ProviderName.GEMINI.value,
    ProviderName.HUGGINGFACE.value,
]


class AIProvider(ABC):
    """Abstract base class for the five coaching operations."""

    name = "unknown"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize AI provider.

        Args:
            config: Provider configuration
        """
        self.config = config or {}
        self.logger = get_logger(f"llm.provider.{self.name}")

    @abstractmethod
    def analyze_resume(self, content: str) -> ResumeAnalysis:
        """Extract skills, an experience summary and achievements from resume text."""

    @abstractmethod
    def research_company(self, company_name: str, position: str) -> CompanyInsight:
        """Describe a company's culture, mission, news and the skills a position needs."""

    @abstractmethod
    def generate_interview_questions(
        self,
        company_name: str,
        position: str,
        skills: Sequence[str],
        experience: str,
    ) -> List[InterviewQuestion]:
        """Generate between three and ten interview questions with unique ids."""

    @abstractmethod
    def evaluate_response(self, question: str, response: str) -> ResponseFeedback:
        """Score an answer and list its strengths and improvements."""

    @abstractmethod
    def generate_suggestions(
        self,
        context: str,
        conversation: str,
        user_profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
    ) -> AssistantSuggestion:
        """Suggest talking points for the current turn of a live interview."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class ProviderRegistry(AIProvider):
    """Tries configured providers in priority order, ending at the heuristic fallback.

    The registry owns its providers. The ``fallback`` entry is created with the
    registry and can never be removed, so every operation has a provider that
    answers without the network. Mutations are serialized with a lock and
    ``try_in_order`` iterates over a snapshot taken when the call starts.
    """

    name = "registry"

    def __init__(
        self,
        api_keys: Optional[Dict[str, str]] = None,
        provider_order: Optional[Sequence[str]] = None,
        provider_settings: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        """Initialize the registry.

        Args:
            api_keys: Provider name to API key; empty keys are ignored
            provider_order: Priority order of provider names, fallback excluded
            provider_settings: Per-provider settings (model, base_url, timeout, ...)
        """
        super().__init__()
        self.logger = get_logger("llm.registry")
        self._lock = threading.RLock()
        self._providers: Dict[str, AIProvider] = {}
        self._provider_settings = provider_settings or {}
        self._provider_order = self._normalize_order(provider_order or DEFAULT_PROVIDER_ORDER)
        self._provider_performance: Dict[str, List[float]] = {}
        self._failure_counts: Dict[str, int] = {}

        for provider_name, api_key in (api_keys or {}).items():
            normalized = (provider_name or "").strip().lower()
            if not api_key:
                continue
            if normalized not in SUPPORTED_PROVIDERS:
                self.logger.warning(f"Ignoring API key for unsupported provider: {provider_name}")
                continue
            self.add_provider(normalized, api_key)

        from ..providers.fallback_provider import FallbackProvider
        self._providers[FALLBACK_PROVIDER] = FallbackProvider()

        self.logger.info(f"Initialized provider registry with {len(self.list_providers())} configured providers")

    def _normalize_order(self, order: Iterable[str]) -> List[str]:
        normalized = []
        for provider_name in order:
            provider_name = (provider_name or "").strip().lower()
            if not provider_name or provider_name == FALLBACK_PROVIDER or provider_name in normalized:
                continue
            if provider_name not in SUPPORTED_PROVIDERS:
                self.logger.warning(f"Unknown provider in priority order: {provider_name}")
                continue
            normalized.append(provider_name)
        return normalized

    def _create_provider(self, provider_name: str, api_key: str) -> AIProvider:
        """Create provider instance for registry use."""
        from ..providers import create_provider
        return create_provider(
            provider_name,
            api_key,
            settings=self._provider_settings.get(provider_name),
            propagate_errors=True,
        )

    def _resolve_order(self, providers: Dict[str, AIProvider]) -> List[str]:
        ordered = [name for name in self._provider_order if name in providers]
        ordered += [name for name in providers if name not in ordered and name != FALLBACK_PROVIDER]
        ordered.append(FALLBACK_PROVIDER)
        return ordered

    def try_in_order(self, operation: Callable[[AIProvider], T], operation_name: str = "operation") -> T:
        """Run ``operation`` against each provider until one succeeds.

        Args:
            operation: Callable receiving a provider and returning the result
            operation_name: Label used in logs and performance metrics

        Returns:
            The first successful result.

        Raises:
            AllProvidersFailedError: If every provider, fallback included, raised.
        """
        with self._lock:
            providers = dict(self._providers)
            order = self._resolve_order(providers)

        failures: Dict[str, str] = {}
        for provider_name in order:
            provider = providers[provider_name]
            start_time = time.time()
            try:
                result = operation(provider)
            except Exception as e:
                failures[provider_name] = f"{type(e).__name__}: {e}"
                self._record_failure(provider_name)
                self.logger.warning(f"Provider {provider_name} failed during {operation_name}: {e}")
                continue

            response_time = time.time() - start_time
            self._update_provider_performance(provider_name, response_time)
            log_performance(operation_name, response_time, provider=provider_name)
            return result

        # The fallback provider never performs I/O, so reaching this is a bug.
        self.logger.error(
            f"All providers failed during {operation_name}, including the fallback provider",
            extra={"failures": failures},
        )
        raise AllProvidersFailedError("All AI providers failed", failures)

    def _update_provider_performance(self, provider_name: str, response_time: float) -> None:
        """Update provider performance metrics."""
        with self._lock:
            performance_history = self._provider_performance.setdefault(provider_name, [])
            performance_history.append(response_time)

            # Keep only last 10 performance measurements
            if len(performance_history) > 10:
                performance_history.pop(0)

    def _record_failure(self, provider_name: str) -> None:
        with self._lock:
            self._failure_counts[provider_name] = self._failure_counts.get(provider_name, 0) + 1

    def add_provider(self, provider_name: str, api_key: str) -> None:
        """Register a provider, replacing any existing entry with the same name.

        Raises:
            ConfigurationError: If the name is unsupported, reserved, or the key is empty.
        """
        normalized = (provider_name or "").strip().lower()
        if normalized == FALLBACK_PROVIDER:
            raise ConfigurationError(f"Provider name '{FALLBACK_PROVIDER}' is reserved", config_key="provider")
        if normalized not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(f"Unsupported provider: {provider_name}", config_key="provider")
        if not api_key:
            raise ConfigurationError(f"An API key is required for provider {normalized}", config_key=normalized)

        provider = self._create_provider(normalized, api_key)
        with self._lock:
            replaced = normalized in self._providers
            self._providers[normalized] = provider
        self.logger.info(f"{'Replaced' if replaced else 'Added'} provider {normalized}")

    def remove_provider(self, provider_name: str) -> bool:
        """Remove a provider. The fallback provider cannot be removed.

        Returns:
            True if a provider was removed.
        """
        normalized = (provider_name or "").strip().lower()
        if normalized == FALLBACK_PROVIDER:
            self.logger.warning("Refusing to remove the fallback provider")
            return False
        with self._lock:
            removed = self._providers.pop(normalized, None)
        if removed is not None:
            self.logger.info(f"Removed provider {normalized}")
        return removed is not None

    def list_providers(self) -> List[str]:
        """Names of configured providers, fallback excluded."""
        with self._lock:
            return [name for name in self._providers if name != FALLBACK_PROVIDER]

    def get_provider(self, provider_name: str) -> Optional[AIProvider]:
        with self._lock:
            return self._providers.get((provider_name or "").strip().lower())

    def get_provider_order(self) -> List[str]:
        """Effective attempt order, ending with the fallback provider."""
        with self._lock:
            return self._resolve_order(dict(self._providers))

    def set_provider_order(self, provider_order: Sequence[str]) -> None:
        with self._lock:
            self._provider_order = self._normalize_order(provider_order)

    def get_provider_stats(self) -> Dict[str, Dict[str, Any]]:
        """Response-time and failure counters per provider."""
        with self._lock:
            stats = {}
            for provider_name in self._resolve_order(dict(self._providers)):
                performance_history = self._provider_performance.get(provider_name, [])
                stats[provider_name] = {
                    "avg_response_time": sum(performance_history) / len(performance_history) if performance_history else 0,
                    "total_requests": len(performance_history),
                    "failures": self._failure_counts.get(provider_name, 0),
                }
            return stats

    def analyze_resume(self, content: str) -> ResumeAnalysis:
        return self.try_in_order(lambda p: p.analyze_resume(content), "analyze_resume")

    def research_company(self, company_name: str, position: str) -> CompanyInsight:
        return self.try_in_order(lambda p: p.research_company(company_name, position), "research_company")

    def generate_interview_questions(
        self,
        company_name: str,
        position: str,
        skills: Sequence[str],
        experience: str,
    ) -> List[InterviewQuestion]:
        return self.try_in_order(
            lambda p: p.generate_interview_questions(company_name, position, skills, experience),
            "generate_interview_questions",
        )

    def evaluate_response(self, question: str, response: str) -> ResponseFeedback:
        return self.try_in_order(lambda p: p.evaluate_response(question, response), "evaluate_response")

    def generate_suggestions(
        self,
        context: str,
        conversation: str,
        user_profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
    ) -> AssistantSuggestion:
        return self.try_in_order(
            lambda p: p.generate_suggestions(context, conversation, user_profile),
            "generate_suggestions",
        )

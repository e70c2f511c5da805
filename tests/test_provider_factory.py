import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from career_coach.providers import AnthropicProvider, HuggingFaceProvider, OpenAIProvider  # noqa: E402
from career_coach.services.llm_manager import AIProvider, ProviderRegistry  # noqa: E402
from career_coach.services.provider_factory import (  # noqa: E402
    create_ai_provider,
    create_ai_provider_from_config,
)


class CreateAIProviderTests(unittest.TestCase):
    def test_preferred_provider_with_key_is_used_alone(self):
        provider = create_ai_provider({"openai": "sk-test", "anthropic": "ant"}, preferred_provider="openai")
        self.assertIsInstance(provider, OpenAIProvider)
        self.assertNotIsInstance(provider, ProviderRegistry)
        self.assertFalse(hasattr(provider, "try_in_order"))
        self.assertFalse(provider.propagate_errors)

    def test_default_preference_is_huggingface(self):
        provider = create_ai_provider({"huggingface": "hf_token"})
        self.assertIsInstance(provider, HuggingFaceProvider)

    def test_no_keys_gives_fallback_only_registry(self):
        provider = create_ai_provider()
        self.assertIsInstance(provider, ProviderRegistry)
        self.assertEqual(provider.list_providers(), [])
        self.assertEqual(provider.get_provider_order(), ["fallback"])

    def test_preferred_without_key_seeds_registry(self):
        provider = create_ai_provider({"openai": "sk-test", "gemini": "g", "anthropic": ""}, preferred_provider="anthropic")
        self.assertIsInstance(provider, ProviderRegistry)
        self.assertEqual(sorted(provider.list_providers()), ["gemini", "openai"])

    def test_unknown_key_names_are_ignored(self):
        with self.assertLogs("provider_factory", level="WARNING"):
            provider = create_ai_provider({"deepseek": "k"}, preferred_provider="deepseek")
        self.assertIsInstance(provider, ProviderRegistry)
        self.assertEqual(provider.list_providers(), [])

    def test_key_names_are_case_insensitive(self):
        provider = create_ai_provider({"Anthropic": "ant"}, preferred_provider="ANTHROPIC")
        self.assertIsInstance(provider, AnthropicProvider)

    def test_config_order_and_settings(self):
        provider = create_ai_provider(
            {"openai": "o", "anthropic": "a"},
            preferred_provider=None,
            config={
                "provider_order": ["openai", "anthropic"],
                "providers": {"openai": {"model": "gpt-4o-mini"}},
            },
        )
        self.assertEqual(provider.get_provider_order(), ["openai", "anthropic", "fallback"])
        self.assertEqual(provider.get_provider("openai").model, "gpt-4o-mini")

    def test_single_adapter_receives_settings(self):
        provider = create_ai_provider(
            {"openai": "o"},
            preferred_provider="openai",
            config={"providers": {"openai": {"base_url": "https://proxy.local/v1"}}},
        )
        self.assertEqual(provider.base_url, "https://proxy.local/v1")

    def test_every_result_is_an_ai_provider(self):
        for keys, preferred in (({}, None), ({"gemini": "g"}, "gemini"), ({"gemini": "g"}, "openai")):
            with self.subTest(preferred=preferred):
                self.assertIsInstance(create_ai_provider(keys, preferred_provider=preferred), AIProvider)


class CreateFromConfigTests(unittest.TestCase):
    def test_reads_configuration_manager(self):
        config_manager = MagicMock()
        config_manager.get_api_keys.return_value = {"gemini": "g", "openai": "o"}
        config_manager.get_preferred_provider.return_value = "huggingface"
        config_manager.get_provider_order.return_value = ["gemini", "openai"]
        config_manager.get_all_provider_settings.return_value = {"gemini": {"model": "gemini-2.5-pro"}}

        provider = create_ai_provider_from_config(config_manager)

        self.assertIsInstance(provider, ProviderRegistry)
        self.assertEqual(provider.get_provider_order(), ["gemini", "openai", "fallback"])
        self.assertEqual(provider.get_provider("gemini").model, "gemini-2.5-pro")


if __name__ == "__main__":
    unittest.main()

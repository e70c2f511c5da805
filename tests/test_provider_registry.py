import sys
import threading
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import requests  # noqa: E402

from career_coach.models.resume import ResumeAnalysis  # noqa: E402
from career_coach.providers import OpenAIProvider  # noqa: E402
from career_coach.services import heuristics  # noqa: E402
from career_coach.services.llm_manager import ProviderRegistry  # noqa: E402
from career_coach.utils.exceptions import AllProvidersFailedError, ConfigurationError  # noqa: E402

SESSION_PATH = "career_coach.providers.base.requests.Session"


class ZeroKeyRegistryTests(unittest.TestCase):
    def setUp(self):
        self.registry = ProviderRegistry()

    def test_only_fallback_is_present(self):
        self.assertEqual(self.registry.list_providers(), [])
        self.assertEqual(self.registry.get_provider_order(), ["fallback"])

    def test_research_twice_returns_well_formed_insights(self):
        first = self.registry.research_company("Acme", "Engineer")
        second = self.registry.research_company("Acme", "Engineer")
        for insight in (first, second):
            self.assertEqual(insight.company_name, "Acme")
            self.assertEqual(insight.culture, "Acme values teamwork and innovation")
            self.assertTrue(insight.required_skills)

    def test_fallback_cannot_be_removed(self):
        self.assertFalse(self.registry.remove_provider("fallback"))
        self.assertFalse(self.registry.remove_provider("FALLBACK"))
        questions = self.registry.generate_interview_questions("Acme", "Engineer", [], "")
        self.assertEqual(len(questions), 10)

    def test_every_operation_answers(self):
        self.assertIsInstance(self.registry.analyze_resume("Python"), ResumeAnalysis)
        self.assertEqual(self.registry.evaluate_response("Q", "").score, 5)
        suggestion = self.registry.generate_suggestions("ctx", "conv", {"skills": ["Go"]})
        self.assertEqual(suggestion.key_points[0], "Highlight your Go expertise")


class RegistryMutationTests(unittest.TestCase):
    def setUp(self):
        self.registry = ProviderRegistry()

    def test_add_provider_builds_propagating_adapter(self):
        self.registry.add_provider("OpenAI", "sk-test")
        self.assertEqual(self.registry.list_providers(), ["openai"])
        provider = self.registry.get_provider("openai")
        self.assertIsInstance(provider, OpenAIProvider)
        self.assertTrue(provider.propagate_errors)

    def test_add_provider_replaces_existing_entry(self):
        self.registry.add_provider("openai", "first")
        self.registry.add_provider("openai", "second")
        self.assertEqual(self.registry.list_providers(), ["openai"])
        self.assertEqual(self.registry.get_provider("openai").api_key, "second")

    def test_add_provider_rejects_bad_input(self):
        for name, key in (("deepseek", "k"), ("fallback", "k"), ("openai", "")):
            with self.subTest(name=name):
                with self.assertRaises(ConfigurationError):
                    self.registry.add_provider(name, key)
        self.assertEqual(self.registry.list_providers(), [])

    def test_remove_provider(self):
        self.registry.add_provider("gemini", "k")
        self.assertTrue(self.registry.remove_provider("gemini"))
        self.assertFalse(self.registry.remove_provider("gemini"))
        self.assertEqual(self.registry.list_providers(), [])

    def test_unknown_keys_are_ignored(self):
        with self.assertLogs("llm.registry", level="WARNING"):
            registry = ProviderRegistry(api_keys={"deepseek": "k", "openai": ""})
        self.assertEqual(registry.list_providers(), [])

    def test_provider_settings_reach_adapters(self):
        registry = ProviderRegistry(
            api_keys={"openai": "k"},
            provider_settings={"openai": {"model": "gpt-4o-mini", "timeout": 10}},
        )
        provider = registry.get_provider("openai")
        self.assertEqual(provider.model, "gpt-4o-mini")
        self.assertEqual(provider.timeout, 10)


class ProviderOrderTests(unittest.TestCase):
    def test_default_priority_order(self):
        registry = ProviderRegistry(api_keys={"huggingface": "h", "openai": "o", "anthropic": "a", "gemini": "g"})
        self.assertEqual(
            registry.get_provider_order(),
            ["anthropic", "openai", "gemini", "huggingface", "fallback"],
        )

    def test_configured_order_then_remaining_then_fallback(self):
        registry = ProviderRegistry(
            api_keys={"openai": "o", "anthropic": "a", "gemini": "g"},
            provider_order=["gemini"],
        )
        self.assertEqual(registry.get_provider_order(), ["gemini", "openai", "anthropic", "fallback"])

    def test_set_provider_order_ignores_unknown_and_fallback(self):
        registry = ProviderRegistry(api_keys={"openai": "o", "anthropic": "a"})
        registry.set_provider_order(["fallback", "openai", "nope", "OPENAI"])
        self.assertEqual(registry.get_provider_order(), ["openai", "anthropic", "fallback"])


class TryInOrderTests(unittest.TestCase):
    def setUp(self):
        self.registry = ProviderRegistry(api_keys={"openai": "o", "anthropic": "a"})

    def test_returns_first_success(self):
        attempted = []

        def operation(provider):
            attempted.append(provider.name)
            if provider.name == "anthropic":
                raise RuntimeError("down")
            return provider.name

        self.assertEqual(self.registry.try_in_order(operation, "probe"), "openai")
        self.assertEqual(attempted, ["anthropic", "openai"])
        stats = self.registry.get_provider_stats()
        self.assertEqual(stats["anthropic"]["failures"], 1)
        self.assertEqual(stats["openai"]["total_requests"], 1)

    def test_exhaustion_raises_with_every_failure(self):
        def operation(provider):
            raise RuntimeError(f"{provider.name} broke")

        with self.assertLogs("llm.registry", level="ERROR"):
            with self.assertRaises(AllProvidersFailedError) as ctx:
                self.registry.try_in_order(operation, "probe")
        self.assertEqual(ctx.exception.attempted_providers, ["anthropic", "openai", "fallback"])
        self.assertIn("fallback broke", ctx.exception.failures["fallback"])

    def test_http_failures_fall_through_to_heuristics(self):
        response = MagicMock(status_code=503, headers={})
        with patch(SESSION_PATH) as session_cls:
            session_cls.return_value.post.return_value = response
            feedback = self.registry.evaluate_response("Q", "For example, revenue increased 20%")

        self.assertEqual(feedback, heuristics.evaluate_response("Q", "For example, revenue increased 20%"))
        self.assertEqual(session_cls.return_value.post.call_count, 2)

    def test_malformed_output_does_not_advance(self):
        response = MagicMock(status_code=200, headers={})
        response.json.return_value = {"content": [{"type": "text", "text": "no json here"}]}
        with patch(SESSION_PATH) as session_cls:
            session_cls.return_value.post.return_value = response
            self.registry.analyze_resume("Python")

        # anthropic absorbed the bad output itself
        self.assertEqual(session_cls.return_value.post.call_count, 1)
        self.assertEqual(self.registry.get_provider_stats()["anthropic"]["total_requests"], 1)

    def test_performance_history_is_bounded(self):
        for _ in range(15):
            self.registry.try_in_order(lambda provider: True, "probe")
        self.assertEqual(self.registry.get_provider_stats()["anthropic"]["total_requests"], 10)


class ConcurrencyTests(unittest.TestCase):
    def test_mutation_during_iteration(self):
        registry = ProviderRegistry(api_keys={"openai": "o"})
        errors = []
        results = []

        def call_operations():
            try:
                for _ in range(20):
                    results.append(registry.analyze_resume("Python developer"))
            except Exception as e:
                errors.append(e)

        def mutate():
            try:
                for i in range(20):
                    registry.add_provider("gemini", f"key-{i}")
                    registry.remove_provider("gemini")
                    registry.remove_provider("fallback")
            except Exception as e:
                errors.append(e)

        with patch(SESSION_PATH) as session_cls:
            session_cls.return_value.post.side_effect = requests.exceptions.ConnectionError("offline")
            threads = [threading.Thread(target=call_operations) for _ in range(4)]
            threads += [threading.Thread(target=mutate) for _ in range(2)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(results), 80)
        self.assertTrue(all(r.skills == ["Python"] for r in results))
        self.assertEqual(registry.get_provider_order()[-1], "fallback")


if __name__ == "__main__":
    unittest.main()

import json
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from click.testing import CliRunner  # noqa: E402

from career_coach.cli import cli  # noqa: E402

MANAGED_ENV_VARS = [
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "HUGGINGFACE_API_KEY",
    "AI_PREFERRED_PROVIDER",
    "AI_PROVIDER_ORDER",
    "STORAGE_BACKEND",
    "STORAGE_PATH",
]


class CliTests(unittest.TestCase):
    def setUp(self):
        env_patcher = patch.dict(os.environ, {})
        env_patcher.start()
        self.addCleanup(env_patcher.stop)
        for name in MANAGED_ENV_VARS:
            os.environ.pop(name, None)

        self.runner = CliRunner()
        self._fs = self.runner.isolated_filesystem()
        self._fs.__enter__()
        self.addCleanup(self._fs.__exit__, None, None, None)

    def invoke(self, *args, **kwargs):
        result = self.runner.invoke(cli, list(args), **kwargs)
        if result.exception and not isinstance(result.exception, SystemExit):
            raise result.exception
        return result

    def invoke_json(self, *args):
        result = self.invoke("--json", *args)
        self.assertEqual(result.exit_code, 0, result.output)
        return json.loads(result.output)

    def test_research(self):
        payload = self.invoke_json("research", "Acme", "Engineer")
        self.assertEqual(payload["companyName"], "Acme")
        self.assertEqual(payload["culture"], "Acme values teamwork and innovation")

    def test_questions_with_skills(self):
        payload = self.invoke_json("questions", "Acme", "Engineer", "--skill", "Python", "--skill", "SQL")
        self.assertEqual(len(payload), 10)
        self.assertIn("Python", payload[0]["text"])
        self.assertEqual(len({q["id"] for q in payload}), 10)

    def test_evaluate_inline_answer(self):
        payload = self.invoke_json("evaluate", "Why us?", "--answer", "short")
        self.assertEqual(payload["score"], 5)

    def test_evaluate_answer_file(self):
        Path("answer.txt").write_text("For example, in one project costs decreased 15%.", encoding="utf-8")
        payload = self.invoke_json("evaluate", "Tell me about a project", "--answer-file", "answer.txt")
        self.assertEqual(payload["score"], 8)
        self.assertIn("Provided specific examples", payload["strengths"])

    def test_evaluate_requires_exactly_one_answer_source(self):
        result = self.invoke("evaluate", "Why us?")
        self.assertEqual(result.exit_code, 2)

    def test_analyze_resume(self):
        Path("resume.txt").write_text("Python and Docker engineer\nDelivered a payments platform\n", encoding="utf-8")
        payload = self.invoke_json("analyze-resume", "resume.txt")
        self.assertEqual(payload["skills"], ["Python", "Docker"])
        self.assertEqual(payload["achievements"], ["Delivered a payments platform"])

    def test_analyze_empty_resume_fails(self):
        Path("empty.txt").write_text("", encoding="utf-8")
        result = self.invoke("analyze-resume", "empty.txt")
        self.assertEqual(result.exit_code, 1)

    def test_suggest(self):
        payload = self.invoke_json(
            "suggest", "--context", "Acme backend role", "--conversation", "Tell me about yourself",
            "--skill", "Go", "--achievement", "a", "--achievement", "b", "--achievement", "c", "--achievement", "d",
        )
        self.assertEqual(payload["keyPoints"][0], "Highlight your Go expertise")
        self.assertEqual(payload["relevantAchievements"], ["a", "b", "c"])

    def test_providers_without_keys(self):
        payload = self.invoke_json("providers")
        self.assertEqual(payload["mode"], "registry")
        self.assertEqual(payload["order"], ["fallback"])

    def test_provider_option_selects_single_adapter(self):
        os.environ["OPENAI_API_KEY"] = "sk-test"
        payload = self.invoke_json("--provider", "openai", "providers")
        self.assertEqual(payload["mode"], "single")
        self.assertEqual(payload["provider"]["model"], "gpt-4o")
        self.assertNotIn("sk-test", json.dumps(payload))

    def test_configured_keys_without_preference_use_registry(self):
        os.environ["GEMINI_API_KEY"] = "g"
        os.environ["OPENAI_API_KEY"] = "o"
        payload = self.invoke_json("providers")
        self.assertEqual(payload["order"], ["openai", "gemini", "fallback"])

    def test_rich_output(self):
        result = self.invoke("research", "Acme", "Engineer")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Acme values teamwork and innovation", result.output)

    def test_history_across_invocations(self):
        os.environ["STORAGE_BACKEND"] = "file"
        os.environ["STORAGE_PATH"] = "coach-data"
        Path("resume.txt").write_text("Python engineer\nLed a data migration\n", encoding="utf-8")

        self.assertEqual(self.invoke("analyze-resume", "resume.txt", "--user-id", "4").exit_code, 0)
        answers = "For example, in one project revenue increased 20%\n" + "skip\n" * 9
        result = self.invoke("interview", "Acme", "Engineer", "--user-id", "4", input=answers)
        self.assertEqual(result.exit_code, 0, result.output)

        payload = self.invoke_json("history", "--user-id", "4")
        self.assertEqual(payload["userId"], 4)
        self.assertEqual([r["filename"] for r in payload["resumes"]], ["resume.txt"])
        self.assertEqual(payload["resumes"][0]["analysis"]["skills"], ["Python"])
        self.assertEqual(len(payload["sessions"]), 1)
        session = payload["sessions"][0]
        self.assertEqual((session["companyName"], session["answered"], session["questions"]), ("Acme", 1, 10))
        self.assertFalse(session["completed"])

        rich_result = self.invoke("history", "--user-id", "4")
        self.assertEqual(rich_result.exit_code, 0)
        self.assertIn("resume.txt", rich_result.output)

    def test_history_for_unknown_user(self):
        result = self.invoke("history", "--user-id", "99")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("No history for user 99", result.output)
        self.assertEqual(self.invoke_json("history", "--user-id", "99")["sessions"], [])

    def test_interactive_interview(self):
        answers = "For example, in one project revenue increased 20%\n" + "skip\n" * 9
        result = self.invoke("interview", "Acme", "Engineer", input=answers)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Final Report", result.output)
        self.assertIn("Questions answered: 1/10", result.output)


if __name__ == "__main__":
    unittest.main()

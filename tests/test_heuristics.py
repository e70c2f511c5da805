import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from career_coach.models.enums import QuestionType  # noqa: E402
from career_coach.services import heuristics  # noqa: E402


def _words(count: int) -> str:
    return " ".join(["word"] * count)


class SkillExtractionTests(unittest.TestCase):
    def test_matches_vocabulary_case_insensitively_in_vocabulary_order(self):
        text = "Docker enthusiast. Wrote python services backed by sql databases."
        self.assertEqual(heuristics.extract_skills(text), ["Python", "SQL", "Docker"])

    def test_caps_at_eight_skills(self):
        text = "JavaScript TypeScript React Node.js Python Java C++ SQL HTML CSS"
        skills = heuristics.extract_skills(text)
        self.assertEqual(len(skills), 8)
        self.assertEqual(skills[-1], "SQL")
        self.assertNotIn("HTML", skills)

    def test_is_deterministic(self):
        text = "Leadership, Agile, Scrum and AWS at scale"
        self.assertEqual(heuristics.extract_skills(text), heuristics.extract_skills(text))

    def test_text_without_vocabulary(self):
        self.assertEqual(heuristics.extract_skills("I enjoy gardening and baking."), [])
        self.assertEqual(heuristics.extract_skills(""), [])


class AchievementExtractionTests(unittest.TestCase):
    def test_keeps_trimmed_action_lines(self):
        text = "  Led a team of 5 engineers  \nSkills: Python\nImproved latency by 30%\n"
        self.assertEqual(
            heuristics.extract_achievements(text),
            ["Led a team of 5 engineers", "Improved latency by 30%"],
        )

    def test_requires_whole_words(self):
        self.assertEqual(heuristics.extract_achievements("Misled nobody\nrebuilt nothing"), [])

    def test_caps_at_five(self):
        text = "\n".join(f"Delivered project {i}" for i in range(8))
        self.assertEqual(len(heuristics.extract_achievements(text)), 5)


class ResumeAnalysisTests(unittest.TestCase):
    def test_empty_text(self):
        analysis = heuristics.analyze_resume("")
        self.assertEqual(analysis.skills, [])
        self.assertEqual(analysis.achievements, [])
        self.assertEqual(analysis.experience, heuristics.DEFAULT_EXPERIENCE_SUMMARY)

    def test_resume_text(self):
        analysis = heuristics.analyze_resume("Python developer\nBuilt a Kubernetes platform")
        self.assertEqual(analysis.skills, ["Python", "Kubernetes"])
        self.assertEqual(analysis.achievements, ["Built a Kubernetes platform"])


class CompanyResearchTests(unittest.TestCase):
    def test_templated_insight(self):
        insight = heuristics.research_company("Acme", "Engineer")
        self.assertEqual(insight.company_name, "Acme")
        self.assertEqual(insight.culture, "Acme values teamwork and innovation")
        self.assertEqual(insight.mission, "Acme strives for industry leadership")
        self.assertEqual(insight.recent_news, "Acme is focused on growth opportunities")
        self.assertEqual(insight.required_skills, ["Technical Skills", "Problem Solving", "Systems Thinking", "Innovation"])

    def test_position_table_first_match_wins(self):
        self.assertEqual(heuristics.default_skills_for_position("Frontend Developer")[0], "Programming")
        self.assertEqual(heuristics.default_skills_for_position("Engineering Manager")[0], "Leadership")
        self.assertEqual(heuristics.default_skills_for_position("UX DESIGNER")[0], "Creative Thinking")
        self.assertEqual(heuristics.default_skills_for_position("Data Analyst")[0], "Data Analysis")
        self.assertEqual(heuristics.default_skills_for_position("Chef"), heuristics.GENERIC_POSITION_SKILLS)

    def test_completes_partial_model_output(self):
        insight = heuristics.complete_company_insight("Acme", "Data Analyst", {"culture": "Remote-first"})
        self.assertEqual(insight.culture, "Remote-first")
        self.assertEqual(insight.mission, "Acme is committed to excellence")
        self.assertEqual(insight.recent_news, "Acme continues to grow")
        self.assertEqual(insight.required_skills[0], "Data Analysis")

    def test_completion_accepts_camel_case_fields(self):
        insight = heuristics.complete_company_insight(
            "Acme", "Engineer", {"recentNews": "Raised a round", "requiredSkills": ["Go"]}
        )
        self.assertEqual(insight.recent_news, "Raised a round")
        self.assertEqual(insight.required_skills, ["Go"])
        self.assertEqual(insight.culture, "Acme fosters innovation and collaboration")


class DefaultQuestionTests(unittest.TestCase):
    def test_ten_questions_with_sequential_ids(self):
        questions = heuristics.default_questions("Acme", "Backend Developer", ["Python"])
        self.assertEqual([q.id for q in questions], [f"q{i}" for i in range(1, 11)])
        self.assertIn("Python", questions[0].text)
        self.assertIn("Acme", questions[2].text)
        self.assertIn("backend developer", questions[3].text)
        self.assertEqual(questions[-1].type, QuestionType.CLOSING)

    def test_placeholder_without_skills(self):
        questions = heuristics.default_questions("Acme", "Engineer", [])
        self.assertIn("relevant technologies", questions[0].text)


class EvaluationTests(unittest.TestCase):
    def test_detailed_answer_with_examples_and_metrics_scores_ten(self):
        answer = "For example, in one project I increased conversion 20% " + _words(110)
        feedback = heuristics.evaluate_response("Tell me about a project", answer)
        self.assertEqual(feedback.score, 10)
        self.assertEqual(
            feedback.strengths,
            [heuristics.STRENGTH_EXAMPLES, heuristics.STRENGTH_METRICS, heuristics.STRENGTH_DETAIL],
        )
        self.assertEqual(feedback.improvements, [])
        self.assertEqual(feedback.suggestion, heuristics.SUGGESTION_STRONG)

    def test_empty_answer(self):
        feedback = heuristics.evaluate_response("Why us?", "")
        self.assertEqual(feedback.score, 5)
        self.assertEqual(feedback.strengths, [])
        self.assertEqual(
            feedback.improvements,
            [heuristics.IMPROVE_EXAMPLES, heuristics.IMPROVE_METRICS, heuristics.IMPROVE_DETAIL],
        )
        self.assertEqual(feedback.suggestion, heuristics.SUGGESTION_DEVELOPING)

    def test_mid_length_answer_gets_no_length_remark(self):
        feedback = heuristics.evaluate_response("Q", _words(60))
        self.assertEqual(feedback.score, 7)
        self.assertNotIn(heuristics.IMPROVE_DETAIL, feedback.improvements)
        self.assertNotIn(heuristics.STRENGTH_DETAIL, feedback.strengths)

    def test_metric_patterns(self):
        for answer in ("It took 3 months", "We saved $500", "Up 15%", "Costs decreased sharply"):
            with self.subTest(answer=answer):
                feedback = heuristics.evaluate_response("Q", answer)
                self.assertIn(heuristics.STRENGTH_METRICS, feedback.strengths)

    def test_example_words_are_whole_words(self):
        feedback = heuristics.evaluate_response("Q", "Projection matters")
        self.assertNotIn(heuristics.STRENGTH_EXAMPLES, feedback.strengths)

    def test_score_always_in_range(self):
        for answer in ("", "x", _words(500), "example " * 300, "\n\n\n", "20% " * 80):
            with self.subTest(length=len(answer)):
                score = heuristics.evaluate_response("Q", answer).score
                self.assertGreaterEqual(score, 1)
                self.assertLessEqual(score, 10)


class SuggestionTests(unittest.TestCase):
    def test_uses_first_skill_and_three_achievements(self):
        profile = {"skills": ["Python", "SQL"], "achievements": ["a", "b", "c", "d"]}
        suggestion = heuristics.generate_suggestions("Acme", "Hi", profile)
        self.assertEqual(suggestion.key_points[0], "Highlight your Python expertise")
        self.assertEqual(suggestion.relevant_achievements, ["a", "b", "c"])

    def test_without_profile(self):
        suggestion = heuristics.generate_suggestions("Acme", "Hi", None)
        self.assertEqual(suggestion.key_points[0], "Highlight your technical expertise")
        self.assertEqual(suggestion.relevant_achievements, [])
        self.assertEqual(len(suggestion.follow_up_suggestions), 3)
        self.assertEqual(len(suggestion.communication_tips), 3)


if __name__ == "__main__":
    unittest.main()

"""Deterministic, rule-based results used when no AI backend answers.

Every provider degrades to these functions, and the ``fallback`` provider uses
nothing else. They never touch the network and never raise for string input.
"""

import re
from typing import Any, Dict, List, Optional, Sequence, Union

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.company import CompanyInsight
from ..models.enums import Difficulty, QuestionType
from ..models.interview import InterviewQuestion, ResponseFeedback
from ..models.resume import ResumeAnalysis

MAX_EXTRACTED_SKILLS = 8
MAX_EXTRACTED_ACHIEVEMENTS = 5

DEFAULT_EXPERIENCE_SUMMARY = "Professional with relevant industry experience"
DEFAULT_SKILL_PLACEHOLDER = "relevant technologies"

COMMON_SKILLS = [
    "JavaScript", "TypeScript", "React", "Node.js", "Python", "Java", "C++", "SQL",
    "HTML", "CSS", "Angular", "Vue", "Express", "MongoDB", "PostgreSQL", "AWS",
    "Docker", "Kubernetes", "Git", "Agile", "Scrum", "Leadership", "Communication",
    "Problem Solving", "Project Management", "Team Collaboration",
]

ACHIEVEMENT_PATTERN = re.compile(
    r"\b(achieved|improved|increased|reduced|led|managed|delivered|built|created)\b",
    re.IGNORECASE,
)

# First matching keyword wins, so order matters.
POSITION_SKILLS = [
    ("developer", ["Programming", "Problem Solving", "Version Control", "Testing"]),
    ("manager", ["Leadership", "Communication", "Project Management", "Strategic Planning"]),
    ("designer", ["Creative Thinking", "User Experience", "Visual Design", "Prototyping"]),
    ("analyst", ["Data Analysis", "Critical Thinking", "Research", "Reporting"]),
    ("engineer", ["Technical Skills", "Problem Solving", "Systems Thinking", "Innovation"]),
]
GENERIC_POSITION_SKILLS = ["Communication", "Problem Solving", "Team Collaboration", "Adaptability"]

EXAMPLE_PATTERN = re.compile(r"\b(example|instance|time when|situation|project)\b", re.IGNORECASE)
METRIC_PATTERN = re.compile(
    r"\d+%|\d+\s*(months?|years?|weeks?)|\$\d+|increased|decreased|improved|reduced",
    re.IGNORECASE,
)

STRENGTH_EXAMPLES = "Provided specific examples"
STRENGTH_METRICS = "Mentioned quantifiable results"
STRENGTH_DETAIL = "Comprehensive and detailed response"
IMPROVE_EXAMPLES = "Include more specific examples from your experience"
IMPROVE_METRICS = "Add metrics or measurable outcomes when possible"
IMPROVE_DETAIL = "Provide more detailed explanations"
SUGGESTION_STRONG = "Great response! Consider adding even more specific details to make it exceptional."
SUGGESTION_DEVELOPING = "Good start! Focus on adding specific examples and quantifiable results to strengthen your answer."


def extract_skills(text: str) -> List[str]:
    """Return vocabulary skills mentioned in ``text``, in vocabulary order."""
    lowered = (text or "").lower()
    return [skill for skill in COMMON_SKILLS if skill.lower() in lowered][:MAX_EXTRACTED_SKILLS]


def extract_achievements(text: str) -> List[str]:
    """Return up to five trimmed lines that start from an action verb."""
    lines = (text or "").split("\n")
    matches = [line.strip() for line in lines if ACHIEVEMENT_PATTERN.search(line)]
    return matches[:MAX_EXTRACTED_ACHIEVEMENTS]


def default_skills_for_position(position: str) -> List[str]:
    """Look up a generic skill list for a position title."""
    position_lower = (position or "").lower()
    for keyword, skills in POSITION_SKILLS:
        if keyword in position_lower:
            return list(skills)
    return list(GENERIC_POSITION_SKILLS)


def analyze_resume(text: str) -> ResumeAnalysis:
    return ResumeAnalysis(
        skills=extract_skills(text),
        experience=DEFAULT_EXPERIENCE_SUMMARY,
        achievements=extract_achievements(text),
    )


def research_company(company_name: str, position: str) -> CompanyInsight:
    """Templated, low-confidence company research."""
    return CompanyInsight(
        company_name=company_name,
        position=position,
        culture=f"{company_name} values teamwork and innovation",
        mission=f"{company_name} strives for industry leadership",
        recent_news=f"{company_name} is focused on growth opportunities",
        required_skills=default_skills_for_position(position),
    )


def complete_company_insight(company_name: str, position: str, data: Dict[str, Any]) -> CompanyInsight:
    """Build an insight from partial model output, templating whatever is missing."""
    insight = CompanyInsight.model_validate({**data, "companyName": company_name, "position": position})
    return insight.model_copy(update={
        "culture": insight.culture or f"{company_name} fosters innovation and collaboration",
        "mission": insight.mission or f"{company_name} is committed to excellence",
        "recent_news": insight.recent_news or f"{company_name} continues to grow",
        "required_skills": insight.required_skills or default_skills_for_position(position),
    })


def default_questions(company_name: str, position: str, skills: Optional[Sequence[str]] = None) -> List[InterviewQuestion]:
    """The fixed ten-question mock interview."""
    lead_skill = skills[0] if skills else DEFAULT_SKILL_PLACEHOLDER
    position_lower = (position or "").lower() or "new"
    company = company_name or "our company"
    rows = [
        (f"Tell me about your experience with {lead_skill} and how you've applied it in previous roles.",
         QuestionType.TECHNICAL, Difficulty.MEDIUM),
        ("Describe a challenging project you worked on and how you overcame obstacles.",
         QuestionType.BEHAVIORAL, Difficulty.MEDIUM),
        (f"Why are you interested in working at {company} specifically?",
         QuestionType.MOTIVATIONAL, Difficulty.EASY),
        (f"Walk me through how you would approach a {position_lower} project from start to finish.",
         QuestionType.SITUATIONAL, Difficulty.HARD),
        ("Tell me about a time when you had to learn a new technology quickly. How did you approach it?",
         QuestionType.BEHAVIORAL, Difficulty.MEDIUM),
        ("What do you consider your greatest professional achievement?",
         QuestionType.BEHAVIORAL, Difficulty.EASY),
        ("How do you handle working under pressure and tight deadlines?",
         QuestionType.BEHAVIORAL, Difficulty.MEDIUM),
        ("Describe your experience working in a team environment.",
         QuestionType.BEHAVIORAL, Difficulty.EASY),
        ("What trends do you see in the industry that could impact this role?",
         QuestionType.TECHNICAL, Difficulty.HARD),
        ("Do you have any questions about our company culture or this position?",
         QuestionType.CLOSING, Difficulty.EASY),
    ]
    return [
        InterviewQuestion(id=f"q{index}", text=text, type=question_type, difficulty=difficulty)
        for index, (text, question_type, difficulty) in enumerate(rows, start=1)
    ]


def evaluate_response(question: str, response: str) -> ResponseFeedback:
    """Score an answer from its length, examples and metrics.

    Base score 5; +1 above 50 words, +1 more above 100 words, +2 for example
    language, +1 for quantified results, +1 above 200 characters. The score is
    clamped to [1, 10] and the strengths/improvements mirror which rules fired.
    """
    response = response or ""
    word_count = len(response.split(" "))
    has_examples = bool(EXAMPLE_PATTERN.search(response))
    has_metrics = bool(METRIC_PATTERN.search(response))

    score = 5
    if word_count > 50:
        score += 1
    if word_count > 100:
        score += 1
    if has_examples:
        score += 2
    if has_metrics:
        score += 1
    if len(response) > 200:
        score += 1
    score = min(10, max(1, score))

    strengths = []
    improvements = []

    if has_examples:
        strengths.append(STRENGTH_EXAMPLES)
    else:
        improvements.append(IMPROVE_EXAMPLES)

    if has_metrics:
        strengths.append(STRENGTH_METRICS)
    else:
        improvements.append(IMPROVE_METRICS)

    if word_count > 100:
        strengths.append(STRENGTH_DETAIL)
    elif word_count < 50:
        improvements.append(IMPROVE_DETAIL)

    return ResponseFeedback(
        score=score,
        strengths=strengths,
        improvements=improvements,
        suggestion=SUGGESTION_STRONG if score >= 7 else SUGGESTION_DEVELOPING,
    )


def generate_suggestions(
    context: str,
    conversation: str,
    user_profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
) -> AssistantSuggestion:
    profile = UserProfile.coerce(user_profile)
    lead_skill = profile.skills[0] if profile.skills else "technical"
    return AssistantSuggestion(
        key_points=[
            f"Highlight your {lead_skill} expertise",
            "Mention specific project outcomes",
            "Connect your experience to their needs",
        ],
        follow_up_suggestions=[
            "Ask about team structure and collaboration",
            "Inquire about growth opportunities",
            "Discuss upcoming projects or challenges",
        ],
        communication_tips=[
            "Maintain steady eye contact",
            "Use confident, clear language",
            "Ask clarifying questions when needed",
        ],
        relevant_achievements=profile.achievements[:3],
    )

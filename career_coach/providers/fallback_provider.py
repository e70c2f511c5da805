"""Provider that answers every operation from the heuristics alone."""

from typing import Any, Dict, List, Optional, Sequence, Union

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.company import CompanyInsight
from ..models.enums import ProviderName
from ..models.interview import InterviewQuestion, ResponseFeedback
from ..models.resume import ResumeAnalysis
from ..services import heuristics
from ..services.llm_manager import AIProvider


class FallbackProvider(AIProvider):
    """Last entry of every registry. Never performs I/O."""

    name = ProviderName.FALLBACK.value

    def analyze_resume(self, content: str) -> ResumeAnalysis:
        return heuristics.analyze_resume(content)

    def research_company(self, company_name: str, position: str) -> CompanyInsight:
        return heuristics.research_company(company_name, position)

    def generate_interview_questions(
        self,
        company_name: str,
        position: str,
        skills: Sequence[str],
        experience: str,
    ) -> List[InterviewQuestion]:
        return heuristics.default_questions(company_name, position, list(skills or []))

    def evaluate_response(self, question: str, response: str) -> ResponseFeedback:
        return heuristics.evaluate_response(question, response)

    def generate_suggestions(
        self,
        context: str,
        conversation: str,
        user_profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
    ) -> AssistantSuggestion:
        return heuristics.generate_suggestions(context, conversation, user_profile)

    def get_provider_info(self) -> Dict[str, Any]:
        return {"name": "Heuristic fallback", "model": None, "base_url": None}

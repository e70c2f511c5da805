"""Coaching workflows built on an AI provider and a storage backend."""

from typing import Any, Dict, List, Optional, Union

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.company import CompanyInsight
from ..models.interview import InterviewResponse, InterviewSession
from ..models.resume import ResumeRecord
from ..utils.exceptions import ResourceNotFoundError
from ..utils.logging import get_logger
from .llm_manager import AIProvider
from .storage_manager import MemoryStorageManager, StorageInterface

ENTRY_LEVEL_EXPERIENCE = "Entry level"
UNKNOWN_QUESTION = "Unknown question"


class CoachingService:
    """Resume upload, company research, mock interviews and live suggestions."""

    def __init__(self, provider: AIProvider, storage: Optional[StorageInterface] = None):
        self.provider = provider
        self.storage = storage or MemoryStorageManager()
        self.logger = get_logger("coaching_service")

    def upload_resume(self, user_id: int, filename: str, content: str) -> ResumeRecord:
        """Analyze plain-text resume content and store the result.

        Raises:
            ValueError: If the content is empty.
        """
        if not content or not content.strip():
            raise ValueError("Resume content is empty")

        analysis = self.provider.analyze_resume(content)
        record = ResumeRecord(user_id=user_id, filename=filename, content=content, analysis=analysis)
        self.storage.save_resume(record)
        self.logger.info(f"Analyzed resume {filename} for user {user_id}: {len(analysis.skills)} skills")
        return record

    def get_latest_resume(self, user_id: int) -> ResumeRecord:
        """The user's most recent resume.

        Raises:
            ResourceNotFoundError: If the user has not uploaded one.
        """
        resume = self.storage.get_latest_resume(user_id)
        if resume is None:
            raise ResourceNotFoundError(
                f"No resume found for user {user_id}",
                resource_type="resume",
                resource_id=str(user_id),
            )
        return resume

    def list_resumes(self, user_id: int) -> List[ResumeRecord]:
        return self.storage.list_resumes(user_id)

    def research_company(self, company_name: str, position: str) -> CompanyInsight:
        """Return stored research for the pair, or research and store it."""
        insight = self.storage.get_company_insight(company_name, position)
        if insight is not None:
            self.logger.debug(f"Using stored research for {company_name} / {position}")
            return insight

        insight = self.provider.research_company(company_name, position)
        self.storage.save_company_insight(insight)
        return insight

    def start_interview(self, user_id: int, company_name: str, position: str) -> InterviewSession:
        """Create a mock interview tailored to the user's latest resume."""
        resume = self.storage.get_latest_resume(user_id)
        if resume is not None:
            skills = list(resume.analysis.skills)
            experience = resume.analysis.experience or ENTRY_LEVEL_EXPERIENCE
        else:
            skills, experience = [], ENTRY_LEVEL_EXPERIENCE

        questions = self.provider.generate_interview_questions(company_name, position, skills, experience)
        session = InterviewSession(
            user_id=user_id,
            company_name=company_name,
            position=position,
            questions=questions,
        )
        self.storage.save_session(session)
        self.logger.info(f"Started interview {session.id} for user {user_id} with {len(questions)} questions")
        return session

    def submit_response(self, session_id: str, question_id: str, answer: str) -> InterviewResponse:
        """Evaluate an answer and record it on the session.

        Raises:
            ResourceNotFoundError: If the session does not exist.
        """
        session = self.get_session(session_id)
        question = session.find_question(question_id)
        if question is None:
            self.logger.warning(f"Question {question_id} not found in session {session_id}")
        question_text = question.text if question else UNKNOWN_QUESTION

        feedback = self.provider.evaluate_response(question_text, answer)
        response = InterviewResponse(question_id=question_id, response=answer, feedback=feedback)
        session.add_response(response)
        self.storage.save_session(session)

        if session.completed:
            self.logger.info(f"Interview {session_id} completed, average score {session.average_score()}")
        return response

    def get_session(self, session_id: str) -> InterviewSession:
        session = self.storage.get_session(session_id)
        if session is None:
            raise ResourceNotFoundError(
                f"Interview session not found: {session_id}",
                resource_type="interview_session",
                resource_id=session_id,
            )
        return session

    def suggest(
        self,
        context: str,
        conversation: str,
        profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
    ) -> AssistantSuggestion:
        return self.provider.generate_suggestions(context, conversation, profile)

    def list_sessions(self, user_id: int) -> List[InterviewSession]:
        return self.storage.list_sessions(user_id)

"""Interview session models for the Career Coach system."""

import math
import re
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import BaseModel, IdentifiableModel, TimestampedModel, clean_string_list, clean_text
from .enums import Difficulty, QuestionType

MIN_SCORE = 1
MAX_SCORE = 10
DEFAULT_SCORE = 5


def _to_number(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        match = re.search(r"-?\d+(?:\.\d+)?", str(value)) if value is not None else None
        return float(match.group()) if match else None


def clamp_score(value) -> int:
    """Coerce a model-provided score into an integer within [1, 10].

    Infinite values clamp to the nearest bound; NaN and unreadable values
    become the default score.
    """
    number = _to_number(value)
    if number is None or math.isnan(number):
        return DEFAULT_SCORE
    return int(round(max(MIN_SCORE, min(MAX_SCORE, number))))


class InterviewQuestion(BaseModel):
    """Represents an interview question."""

    id: str = Field(..., description="Question identifier, unique within a session")
    text: str = Field(..., min_length=1, description="Question content")
    type: QuestionType = Field(default=QuestionType.BEHAVIORAL, description="Question category")
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, description="Question difficulty level")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return clean_text(value)

    @field_validator("text", mode="before")
    @classmethod
    def _clean_question_text(cls, value):
        return clean_text(value)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        try:
            return QuestionType(value)
        except (TypeError, ValueError):
            return QuestionType.BEHAVIORAL

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, value):
        try:
            return Difficulty(value)
        except (TypeError, ValueError):
            return Difficulty.MEDIUM


class ResponseFeedback(BaseModel):
    """Feedback on a candidate's answer to one question."""

    score: int = Field(default=DEFAULT_SCORE, ge=MIN_SCORE, le=MAX_SCORE, description="Score from 1 to 10")
    strengths: List[str] = Field(default_factory=list, description="What the answer did well")
    improvements: List[str] = Field(default_factory=list, description="What to improve")
    suggestion: str = Field(default="", description="Overall suggestion")

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_score(value)

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _clean_lists(cls, value):
        return clean_string_list(value)

    @field_validator("suggestion", mode="before")
    @classmethod
    def _clean_suggestion(cls, value):
        return clean_text(value)


class InterviewResponse(BaseModel):
    """A submitted answer and the feedback it received."""

    question_id: str = Field(..., alias="questionId", description="Question identifier")
    response: str = Field(..., description="Candidate's answer")
    feedback: ResponseFeedback = Field(..., description="Evaluation of the answer")
    timestamp: datetime = Field(default_factory=datetime.now, description="Submission time")


class InterviewSession(IdentifiableModel, TimestampedModel):
    """Represents a mock interview session."""

    user_id: int = Field(..., description="Candidate identifier")
    company_name: str = Field(..., alias="companyName", description="Target company")
    position: str = Field(..., description="Target position")
    questions: List[InterviewQuestion] = Field(default_factory=list, description="Generated questions")
    responses: List[InterviewResponse] = Field(default_factory=list, description="Submitted responses")
    completed: bool = Field(default=False, description="Whether every question has been answered")

    def find_question(self, question_id: str) -> Optional[InterviewQuestion]:
        """Look up a question by its identifier."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def add_response(self, response: InterviewResponse) -> None:
        """Record a response and mark the session completed once all questions are answered."""
        self.responses = self.responses + [response]
        answered = {r.question_id for r in self.responses}
        if self.questions and all(q.id in answered for q in self.questions):
            self.completed = True
        self.update_timestamp()

    def average_score(self) -> float:
        """Calculate average score across all responses."""
        if not self.responses:
            return 0.0
        total_score = sum(r.feedback.score for r in self.responses)
        return round(total_score / len(self.responses), 2)

"""Data models for the Career Coach system."""

from .base import BaseModel
from .enums import Difficulty, ProviderName, QuestionType
from .resume import ResumeAnalysis, ResumeRecord
from .company import CompanyInsight, insight_key
from .interview import (
    InterviewQuestion,
    InterviewResponse,
    InterviewSession,
    ResponseFeedback,
    clamp_score,
)
from .assistant import AssistantSuggestion, UserProfile

__all__ = [
    "BaseModel",
    "Difficulty",
    "ProviderName",
    "QuestionType",
    "ResumeAnalysis",
    "ResumeRecord",
    "CompanyInsight",
    "insight_key",
    "InterviewQuestion",
    "InterviewResponse",
    "InterviewSession",
    "ResponseFeedback",
    "clamp_score",
    "AssistantSuggestion",
    "UserProfile",
]

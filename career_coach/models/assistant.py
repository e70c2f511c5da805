"""Real-time assistant models for the Career Coach system."""

from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from .base import BaseModel, clean_string_list, clean_text

MAX_RELEVANT_ACHIEVEMENTS = 3


class UserProfile(BaseModel):
    """Caller-supplied background used to tailor suggestions."""

    skills: List[str] = Field(default_factory=list, description="Candidate skills")
    achievements: List[str] = Field(default_factory=list, description="Candidate achievements")
    experience: str = Field(default="", description="Experience summary")

    class Config:
        extra = "allow"

    @field_validator("skills", "achievements", mode="before")
    @classmethod
    def _clean_lists(cls, value):
        return clean_string_list(value)

    @field_validator("experience", mode="before")
    @classmethod
    def _clean_experience(cls, value):
        return clean_text(value)

    @classmethod
    def coerce(cls, profile: Optional[Union["UserProfile", Dict[str, Any]]]) -> "UserProfile":
        """Accept a profile model, a plain dict, or nothing."""
        if isinstance(profile, cls):
            return profile
        if isinstance(profile, dict):
            return cls.model_validate(profile)
        return cls()


class AssistantSuggestion(BaseModel):
    """Suggestions for one turn of a live interview conversation."""

    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    follow_up_suggestions: List[str] = Field(default_factory=list, alias="followUpSuggestions")
    communication_tips: List[str] = Field(default_factory=list, alias="communicationTips")
    relevant_achievements: List[str] = Field(default_factory=list, alias="relevantAchievements")

    @field_validator("key_points", "follow_up_suggestions", "communication_tips", mode="before")
    @classmethod
    def _clean_lists(cls, value):
        return clean_string_list(value)

    @field_validator("relevant_achievements", mode="before")
    @classmethod
    def _first_achievements(cls, value):
        return clean_string_list(value)[:MAX_RELEVANT_ACHIEVEMENTS]

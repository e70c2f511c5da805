"""Resume data models for the Career Coach system."""

from typing import List

from pydantic import Field, field_validator

from .base import BaseModel, IdentifiableModel, TimestampedModel, clean_string_list, clean_text


class ResumeAnalysis(BaseModel):
    """Skills, experience summary and achievements extracted from a resume."""

    skills: List[str] = Field(default_factory=list, description="Skills, ordered and de-duplicated")
    experience: str = Field(default="", description="Free-text experience summary")
    achievements: List[str] = Field(default_factory=list, description="Key accomplishments")

    class Config:
        frozen = True

    @field_validator("skills", mode="before")
    @classmethod
    def _unique_skills(cls, value):
        seen = set()
        unique = []
        for skill in clean_string_list(value):
            key = skill.lower()
            if key not in seen:
                seen.add(key)
                unique.append(skill)
        return unique

    @field_validator("achievements", mode="before")
    @classmethod
    def _clean_achievements(cls, value):
        return clean_string_list(value)

    @field_validator("experience", mode="before")
    @classmethod
    def _clean_experience(cls, value):
        return clean_text(value)


class ResumeRecord(IdentifiableModel, TimestampedModel):
    """An uploaded resume together with its analysis."""

    user_id: int = Field(..., description="Owner of the resume")
    filename: str = Field(..., description="Original upload filename")
    content: str = Field(..., description="Plain-text resume content")
    analysis: ResumeAnalysis = Field(default_factory=ResumeAnalysis, description="Extracted analysis")

"""Company research models for the Career Coach system."""

from typing import List, Tuple

from pydantic import Field, field_validator

from .base import BaseModel, clean_string_list, clean_text


class CompanyInsight(BaseModel):
    """Research about a company for a specific position."""

    company_name: str = Field(default="", alias="companyName", description="Company researched")
    position: str = Field(default="", description="Target position")
    culture: str = Field(default="", description="Culture and work environment")
    mission: str = Field(default="", description="Mission and values")
    recent_news: str = Field(default="", alias="recentNews", description="Recent developments")
    required_skills: List[str] = Field(default_factory=list, alias="requiredSkills", description="Key skills for the position")

    @field_validator("company_name", "position", "culture", "mission", "recent_news", mode="before")
    @classmethod
    def _clean_text(cls, value):
        return clean_text(value)

    @field_validator("required_skills", mode="before")
    @classmethod
    def _clean_skills(cls, value):
        return clean_string_list(value)

    @property
    def cache_key(self) -> Tuple[str, str]:
        return insight_key(self.company_name, self.position)


def insight_key(company_name: str, position: str) -> Tuple[str, str]:
    """Case-insensitive lookup key for a (company, position) pair."""
    return (company_name.strip().lower(), position.strip().lower())

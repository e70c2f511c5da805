"""Enumeration types for the Career Coach system."""

from enum import Enum


class QuestionType(str, Enum):
    """Interview question categories."""

    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    SITUATIONAL = "situational"
    MOTIVATIONAL = "motivational"
    CLOSING = "closing"

    @classmethod
    def _missing_(cls, value):
        """Handle case variants like "Technical" or "QuestionType.TECHNICAL"."""
        if isinstance(value, str):
            if value.startswith("QuestionType."):
                value = value.split(".", 1)[1]
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class Difficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def _missing_(cls, value):
        """Handle case variants like "Hard" or "Difficulty.HARD"."""
        if isinstance(value, str):
            if value.startswith("Difficulty."):
                value = value.split(".", 1)[1]
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class ProviderName(str, Enum):
    """Identifiers of the supported AI backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    HUGGINGFACE = "huggingface"
    FALLBACK = "fallback"

    @classmethod
    def remote(cls) -> list:
        """Backends that can be configured with an API key."""
        return [cls.OPENAI, cls.ANTHROPIC, cls.GEMINI, cls.HUGGINGFACE]

"""OpenAI chat completions provider."""

import json
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..models.assistant import UserProfile
from .base import Prompt, RemoteAIProvider, dig


class ChatCompletionRequest(BaseModel):
    """OpenAI chat completion request model."""
    model: str = Field(..., description="Model to use for generation")
    messages: List[Dict[str, str]] = Field(..., description="List of messages")
    max_tokens: int = Field(default=1024, description="Maximum tokens to generate")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    response_format: Optional[Dict[str, str]] = Field(default=None, description="Structured output mode")


class OpenAIProvider(RemoteAIProvider):
    """OpenAI API provider implementation."""

    name = "openai"
    default_base_url = "https://api.openai.com/v1"
    default_model = "gpt-4o"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _complete(self, prompt: str, system: Optional[str] = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request = ChatCompletionRequest(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        data = self._make_request(f"{self.base_url}/chat/completions", request.model_dump(exclude_none=True))

        content = dig(data, "choices", 0, "message", "content")
        return content if isinstance(content, str) else ""

    def _build_resume_prompt(self, content: str) -> Prompt:
        system = (
            "You are a resume analysis expert. Extract skills, experience summary, and key achievements "
            "from the resume text. Return a JSON object with 'skills' (array of strings), 'experience' "
            "(string summary), and 'achievements' (array of strings)."
        )
        return f"Analyze this resume content and extract key information:\n\n{content}", system

    def _build_company_prompt(self, company_name: str, position: str) -> Prompt:
        system = (
            "You are a career research expert. Provide company insights including culture, mission, "
            "recent news, and required skills for a specific position. Return a JSON object with "
            "'culture', 'mission', 'recentNews' and 'requiredSkills' (array)."
        )
        prompt = (
            f"Research {company_name} for the position of {position}. Provide insights about company "
            "culture, mission, recent developments, and key skills required for this role."
        )
        return prompt, system

    def _build_questions_prompt(self, company_name: str, position: str, skills: Sequence[str], experience: str) -> Prompt:
        system = (
            "You are an expert interviewer. Generate a set of 10 relevant interview questions based on the "
            "candidate's resume, company, and position. Return a JSON object with 'questions' array, where "
            "each question has 'id', 'text', 'type' (behavioral, technical, situational, motivational, closing), "
            "and 'difficulty' (easy, medium, hard)."
        )
        prompt = f"""Generate interview questions for:
Company: {company_name}
Position: {position}
Candidate Skills: {', '.join(skills) if skills else 'relevant technologies'}
Experience: {experience or 'Not specified'}"""
        return prompt, system

    def _build_evaluation_prompt(self, question: str, response: str) -> Prompt:
        system = (
            "You are an interview coach. Analyze the candidate's response and provide constructive feedback. "
            "Return a JSON object with 'score' (1-10), 'strengths' (array), 'improvements' (array), "
            "and 'suggestion' (string)."
        )
        return f"Evaluate this interview response:\nQuestion: {question}\nResponse: {response}", system

    def _build_suggestions_prompt(self, context: str, conversation: str, profile: UserProfile) -> Prompt:
        system = (
            "You are a real-time interview assistant. Provide helpful suggestions, talking points, and "
            "follow-up questions based on the conversation context. Return a JSON object with 'keyPoints' "
            "(array), 'followUpSuggestions' (array), 'communicationTips' (array), and 'relevantAchievements' (array)."
        )
        prompt = f"""Provide real-time assistance for this interview conversation:
Context: {context}
Recent conversation: {conversation}
User background: {json.dumps(profile.model_dump())}"""
        return prompt, system

    def get_provider_info(self) -> Dict[str, Any]:
        info = super().get_provider_info()
        info["name"] = "OpenAI"
        return info

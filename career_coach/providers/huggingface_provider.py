"""Hugging Face Inference API provider.

The hosted text-generation models are only trusted with resume analysis and
company research. Questions, evaluation and suggestions always come from the
heuristics.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.interview import InterviewQuestion, ResponseFeedback
from ..services import heuristics
from .base import RemoteAIProvider, dig


class HuggingFaceProvider(RemoteAIProvider):
    """Hugging Face Inference API provider implementation."""

    name = "huggingface"
    default_base_url = "https://api-inference.huggingface.co"
    default_model = "microsoft/DialoGPT-medium"
    default_max_tokens = 500
    default_temperature = 0.3

    def _headers(self) -> Dict[str, str]:
        # The public inference endpoint accepts anonymous calls
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def _complete(self, prompt: str, system: Optional[str] = None) -> str:
        payload = {
            "inputs": f"{system}\n\n{prompt}" if system else prompt,
            "parameters": {
                "max_new_tokens": self.max_tokens,
                "temperature": self.temperature,
                "return_full_text": False,
            },
        }
        data = self._make_request(f"{self.base_url}/models/{self.model}", payload)

        text = dig(data, 0, "generated_text") if isinstance(data, list) else dig(data, "generated_text")
        return text if isinstance(text, str) else ""

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
        info = super().get_provider_info()
        info["name"] = "Hugging Face"
        info["remote_operations"] = ["analyze_resume", "research_company"]
        return info

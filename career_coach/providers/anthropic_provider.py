"""Anthropic messages API provider."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base import RemoteAIProvider, dig, join_text

ANTHROPIC_VERSION = "2023-06-01"


class MessagesRequest(BaseModel):
    """Anthropic messages request model."""
    model: str = Field(..., description="Model to use for generation")
    max_tokens: int = Field(default=1024, description="Maximum tokens to generate")
    messages: List[Dict[str, str]] = Field(..., description="Conversation turns")
    system: Optional[str] = Field(default=None, description="System prompt")
    temperature: Optional[float] = Field(default=None, description="Sampling temperature")


class AnthropicProvider(RemoteAIProvider):
    """Anthropic API provider implementation."""

    name = "anthropic"
    default_base_url = "https://api.anthropic.com/v1"
    default_model = "claude-sonnet-4-5"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _complete(self, prompt: str, system: Optional[str] = None) -> str:
        request = MessagesRequest(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
            system=system,
            temperature=self.temperature,
        )
        data = self._make_request(f"{self.base_url}/messages", request.model_dump(exclude_none=True))
        # Only text blocks carry the answer
        return join_text(dig(data, "content"), kind="text")

    def get_provider_info(self) -> Dict[str, Any]:
        info = super().get_provider_info()
        info["name"] = "Anthropic"
        info["api_version"] = ANTHROPIC_VERSION
        return info

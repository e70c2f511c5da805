"""Google Gemini generateContent provider."""

from typing import Any, Dict, Optional

from .base import RemoteAIProvider, dig, join_text


class GeminiProvider(RemoteAIProvider):
    """Gemini API provider implementation."""

    name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"
    default_model = "gemini-2.0-flash"

    def _headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.api_key or ""}

    def _complete(self, prompt: str, system: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
                "responseMimeType": "application/json",
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        data = self._make_request(f"{self.base_url}/models/{self.model}:generateContent", payload)
        return join_text(dig(data, "candidates", 0, "content", "parts"))

    def get_provider_info(self) -> Dict[str, Any]:
        info = super().get_provider_info()
        info["name"] = "Gemini"
        return info

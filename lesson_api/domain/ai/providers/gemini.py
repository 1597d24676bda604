from typing import Any
from urllib import parse

from lesson_api.domain.ai.providers.common import ProviderRequestError, post_json


class GeminiProvider:
    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_sec: int = 60,
    ) -> None:
        if not api_key:
            raise ValueError("gemini_api_key_missing")
        self.api_key = api_key
        self.model = model
        self.timeout_sec = timeout_sec

    @property
    def name(self) -> str:
        return f"gemini:{self.model}"

    def generate_text(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        endpoint = (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            f"{parse.quote(self.model)}:generateContent?key={parse.quote(self.api_key)}"
        )
        payload = {
            "systemInstruction": {
                "parts": [{"text": system_prompt}],
            },
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": user_prompt}],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": 0.3,
            },
        }

        decoded = post_json(
            endpoint,
            payload,
            provider="gemini",
            timeout_sec=self.timeout_sec,
        )
        return self._extract_text(decoded)

    @staticmethod
    def _extract_text(response_json: dict[str, Any]) -> str:
        candidates = response_json.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise ProviderRequestError(provider="gemini", status_code=None, message="gemini_candidates_missing")

        first = candidates[0]
        content = first.get("content", {}) if isinstance(first, dict) else {}
        parts = content.get("parts", [])
        if not isinstance(parts, list):
            raise ProviderRequestError(provider="gemini", status_code=None, message="gemini_parts_missing")

        texts: list[str] = []
        for part in parts:
            text = part.get("text") if isinstance(part, dict) else None
            if isinstance(text, str) and text.strip():
                texts.append(text)
        if texts:
            return "".join(texts)

        raise ProviderRequestError(provider="gemini", status_code=None, message="gemini_text_missing")

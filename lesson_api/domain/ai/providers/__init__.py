"""AI text-generation providers."""

from lesson_api.domain.ai.providers.base import TextGenerationProvider
from lesson_api.domain.ai.providers.common import ProviderRequestError
from lesson_api.domain.ai.providers.gemini import GeminiProvider
from lesson_api.domain.ai.providers.openai import OpenAIProvider

__all__ = ["GeminiProvider", "OpenAIProvider", "ProviderRequestError", "TextGenerationProvider"]

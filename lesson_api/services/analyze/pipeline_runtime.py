from __future__ import annotations

from lesson_api.domain.ai.providers.common import ProviderRequestError
from lesson_api.domain.ai.retry import AllBackendsOverloaded, is_overloaded_failure
from lesson_api.services.analyze.error_policy import (
    AnalyzeError,
    ServiceMisconfigured,
    UpstreamFailed,
    UpstreamOverloaded,
)


def ai_error_detail(exc: BaseException) -> str:
    message = str(exc).strip()
    if not message:
        return "ai_provider_failed"
    return message[:300]


def config_error_message(reason: str) -> str:
    text = str(reason or "").lower()
    if "gemini_api_key_missing" in text:
        return "Missing GEMINI_API_KEY"
    if "openai_api_key_missing" in text:
        return "Missing OPENAI_API_KEY"
    if "openai_base_url_missing" in text:
        return "Missing OPENAI_BASE_URL"
    if "ai_models_missing" in text:
        return "No AI models configured"
    if "unsupported_ai_provider" in text:
        return "Unsupported AI provider"
    return "AI service configuration error"


def classify_ai_failure(exc: BaseException) -> AnalyzeError:
    """Map a backend failure onto the caller-facing error taxonomy."""
    if isinstance(exc, AllBackendsOverloaded) or is_overloaded_failure(exc):
        return UpstreamOverloaded()

    if isinstance(exc, ProviderRequestError):
        if exc.status_code in (401, 403):
            return ServiceMisconfigured("AI provider rejected the configured credentials")
        if exc.status_code == 429:
            return UpstreamFailed("AI provider rate limited the request")
        if exc.status_code is None and "timed out" in exc.message.lower():
            return UpstreamFailed("AI request timed out")
        return UpstreamFailed()

    text = ai_error_detail(exc).lower()
    if "timed out" in text or "timeout" in text:
        return UpstreamFailed("AI request timed out")
    return UpstreamFailed()

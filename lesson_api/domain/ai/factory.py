from lesson_api.core.config import Settings
from lesson_api.domain.ai.providers.gemini import GeminiProvider
from lesson_api.domain.ai.providers.openai import OpenAIProvider
from lesson_api.domain.ai.retry import RetryPolicy
from lesson_api.domain.ai.service import AIService


def build_ai_service(settings: Settings) -> AIService:
    return AIService(
        backends=_build_backends(settings),
        policy=build_retry_policy(settings),
    )


def build_retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts_per_backend=settings.retry_max_attempts,
        base_delay_sec=settings.retry_base_delay_sec,
        backoff_exponent=settings.retry_backoff_exponent,
        jitter_max_sec=settings.retry_jitter_max_sec,
    )


def _build_backends(settings: Settings) -> list[GeminiProvider] | list[OpenAIProvider]:
    if settings.ai_provider == "gemini":
        models = _dedupe_models(settings.gemini_models)
        return [
            GeminiProvider(
                api_key=settings.gemini_api_key,
                model=model,
                timeout_sec=settings.ai_request_timeout_sec,
            )
            for model in models
        ]

    if settings.ai_provider == "openai":
        models = _dedupe_models(settings.openai_models)
        return [
            OpenAIProvider(
                api_key=settings.openai_api_key,
                model=model,
                base_url=settings.openai_base_url,
                timeout_sec=settings.ai_request_timeout_sec,
            )
            for model in models
        ]

    raise ValueError(f"unsupported_ai_provider:{settings.ai_provider}")


def _dedupe_models(models: list[str]) -> list[str]:
    result: list[str] = []
    for model in models:
        name = str(model or "").strip()
        if name and name not in result:
            result.append(name)
    if not result:
        raise ValueError("ai_models_missing")
    return result

"""AI domain services and provider abstractions."""

from lesson_api.domain.ai.factory import build_ai_service, build_retry_policy
from lesson_api.domain.ai.retry import AllBackendsOverloaded, RetryPolicy, is_overloaded_failure
from lesson_api.domain.ai.service import AIService

__all__ = [
    "AIService",
    "AllBackendsOverloaded",
    "RetryPolicy",
    "build_ai_service",
    "build_retry_policy",
    "is_overloaded_failure",
]

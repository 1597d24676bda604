import logging
import random
import time
from typing import Callable, Sequence

from lesson_api.domain.ai.providers.base import TextGenerationProvider
from lesson_api.domain.ai.retry import AllBackendsOverloaded, RetryExhausted, RetryPolicy, run_with_retry


logger = logging.getLogger(__name__)


class AIService:
    """Tries each backend in order, retrying overloads per the policy."""

    def __init__(
        self,
        *,
        backends: Sequence[TextGenerationProvider],
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if not backends:
            raise ValueError("ai_backends_missing")
        self.backends = list(backends)
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._jitter = jitter

    def generate_text(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        total_attempts = 0
        for index, backend in enumerate(self.backends):
            try:
                text, attempts = run_with_retry(
                    lambda _attempt, backend=backend: backend.generate_text(
                        system_prompt=system_prompt,
                        user_prompt=user_prompt,
                    ),
                    policy=self.policy,
                    sleep=self._sleep,
                    jitter=self._jitter,
                    label=backend.name,
                )
            except RetryExhausted as exhausted:
                total_attempts += exhausted.attempt_count
                if index + 1 < len(self.backends):
                    logger.warning(
                        "%s still overloaded after %d attempts, falling back to %s",
                        backend.name,
                        exhausted.attempt_count,
                        self.backends[index + 1].name,
                    )
                continue

            total_attempts += attempts
            if index > 0 or attempts > 1:
                logger.info("%s succeeded after %d total attempts", backend.name, total_attempts)
            return text

        raise AllBackendsOverloaded([backend.name for backend in self.backends], total_attempts)

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
import time
from typing import Callable, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_overloaded_failure(exc: BaseException) -> bool:
    """True only for HTTP 503 responses whose message mentions overload."""
    status_code = getattr(exc, "status_code", None)
    message = str(getattr(exc, "message", "") or exc).lower()
    return status_code == 503 and "overload" in message


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts_per_backend: int = 3
    base_delay_sec: float = 1.0
    backoff_exponent: float = 2.0
    jitter_max_sec: float = 1.0
    retryable: Callable[[BaseException], bool] = is_overloaded_failure

    def delay_for(self, attempt: int, jitter: float = 0.0) -> float:
        return max(0.0, self.base_delay_sec * (attempt ** self.backoff_exponent) + jitter)


class RetryExhausted(RuntimeError):
    def __init__(self, last_error: BaseException, attempt_count: int) -> None:
        self.last_error = last_error
        self.attempt_count = attempt_count
        super().__init__(f"retry_exhausted:{attempt_count}:{last_error}")


class AllBackendsOverloaded(RuntimeError):
    def __init__(self, backend_names: list[str], attempt_count: int) -> None:
        self.backend_names = backend_names
        self.attempt_count = attempt_count
        super().__init__(f"all_backends_overloaded:{','.join(backend_names)}:{attempt_count}")


def run_with_retry(
    call: Callable[[int], T],
    *,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    jitter: Callable[[float, float], float] = random.uniform,
    label: str = "ai_call",
) -> tuple[T, int]:
    """Run `call(attempt)` until it succeeds or the policy gives up.

    Failures rejected by `policy.retryable` propagate unchanged on the first
    occurrence. Retryable failures on the final attempt raise RetryExhausted.
    """
    attempts = max(1, int(policy.max_attempts_per_backend))

    for attempt in range(1, attempts + 1):
        try:
            return call(attempt), attempt
        except Exception as exc:
            if not policy.retryable(exc):
                raise
            if attempt >= attempts:
                raise RetryExhausted(exc, attempt) from exc
            delay = policy.delay_for(attempt, jitter(0.0, policy.jitter_max_sec))
            logger.warning(
                "%s retryable failure on attempt %d/%d, sleeping %.2fs: %s",
                label,
                attempt,
                attempts,
                delay,
                exc,
            )
            sleep(delay)

    raise RuntimeError("retry_loop_exited")  # pragma: no cover

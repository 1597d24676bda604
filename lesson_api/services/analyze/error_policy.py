from typing import Any


MAX_ERROR_MESSAGE_CHARS = 260


class AnalyzeError(Exception):
    """Base for caller-facing failures of the analyze-file pipeline."""

    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None) -> None:
        self.message = normalize_error_message(message) or self.default_message
        self.headers = dict(headers or {})
        super().__init__(self.message)


class BadRequest(AnalyzeError):
    status_code = 400
    default_message = "Invalid request body"


class MethodNotAllowed(AnalyzeError):
    status_code = 405
    default_message = "Method not allowed"
    allow = "POST, OPTIONS"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, headers={"Allow": self.allow})


class RateLimited(AnalyzeError):
    status_code = 429
    default_message = "Too many requests. Please try again later."

    def __init__(self, retry_after_sec: int, message: str | None = None) -> None:
        self.retry_after_sec = max(1, int(retry_after_sec))
        super().__init__(message, headers={"Retry-After": str(self.retry_after_sec)})


class ServiceMisconfigured(AnalyzeError):
    status_code = 500
    default_message = "Service is not configured"


class UpstreamOverloaded(AnalyzeError):
    status_code = 503
    default_message = "The AI model is currently overloaded. Please try again in a few minutes."


class UpstreamBadOutput(AnalyzeError):
    status_code = 500
    default_message = "The AI model returned an invalid lesson. Please try again."


class UpstreamFailed(AnalyzeError):
    status_code = 502
    default_message = "The AI provider request failed"


def normalize_error_message(value: Any) -> str:
    return " ".join(str(value or "").split()).strip()[:MAX_ERROR_MESSAGE_CHARS]


def build_error_payload(message: Any) -> dict[str, str]:
    text = normalize_error_message(message)
    return {"error": text or AnalyzeError.default_message}


def build_unexpected_error_payload() -> dict[str, str]:
    return {"error": "Unexpected server error"}

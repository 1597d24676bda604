import logging
from typing import Any, Mapping

from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from lesson_api.services.analyze.error_policy import BadRequest, MethodNotAllowed, RateLimited
from lesson_api.services.analyze.rate_limit import RateLimiter


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

ALLOWED_METHODS = {"POST", "OPTIONS"}

# 먼저 발견되는 헤더가 우선한다.
CLIENT_KEY_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")
UNKNOWN_CLIENT_KEY = "unknown"

# \uXXXX 서로게이트 쌍이면 한 글자가 JSON에서 12바이트까지 늘어난다.
MAX_JSON_BYTES_PER_CHAR = 12
BODY_OVERHEAD_BYTES = 64 * 1024


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content_text: str
    user_prompt: str | None = None


def handle_preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


def validate_method(method: str) -> None:
    if str(method or "").upper() not in ALLOWED_METHODS:
        raise MethodNotAllowed()


def client_key_from_headers(headers: Mapping[str, str]) -> str:
    for name in CLIENT_KEY_HEADERS:
        raw = headers.get(name)
        if not raw:
            continue
        first = raw.split(",")[0].strip()
        if first:
            return first
    return UNKNOWN_CLIENT_KEY


def check_rate_limit(limiter: RateLimiter, client_key: str) -> None:
    allowed, retry_after_sec = limiter.hit(client_key)
    if not allowed:
        logger.warning("rate limit exceeded for client=%s retry_after=%ss", client_key, retry_after_sec)
        raise RateLimited(retry_after_sec)


def check_content_length(headers: Mapping[str, str], *, max_content_chars: int) -> None:
    raw = headers.get("content-length")
    if not raw:
        return
    try:
        declared = int(raw)
    except ValueError as exc:
        raise BadRequest("Invalid Content-Length header") from exc
    if declared > max_body_bytes(max_content_chars):
        raise BadRequest("Request body too large")


def max_body_bytes(max_content_chars: int) -> int:
    return max_content_chars * MAX_JSON_BYTES_PER_CHAR + BODY_OVERHEAD_BYTES


def validate_body(body: Any, *, max_content_chars: int) -> AnalyzeRequest:
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")

    content_text = body.get("content_text")
    if content_text is None:
        raise BadRequest("Missing content_text")
    if not isinstance(content_text, str):
        raise BadRequest("content_text must be a string")

    try:
        payload = AnalyzeRequest.model_validate(body)
    except ValidationError as exc:
        raise BadRequest("Invalid request body") from exc

    trimmed = payload.content_text.strip()
    if not trimmed:
        raise BadRequest("content_text is empty")
    if len(trimmed) > max_content_chars:
        raise BadRequest(f"content_text exceeds {max_content_chars} characters")

    user_prompt = payload.user_prompt.strip() if isinstance(payload.user_prompt, str) else None
    return AnalyzeRequest(content_text=trimmed, user_prompt=user_prompt or None)

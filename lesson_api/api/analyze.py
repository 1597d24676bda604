from functools import lru_cache
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from lesson_api.core.config import get_settings
from lesson_api.domain.ai import build_ai_service
from lesson_api.services.analyze.error_policy import BadRequest, ServiceMisconfigured
from lesson_api.services.analyze.ingress import (
    CORS_HEADERS,
    check_content_length,
    check_rate_limit,
    client_key_from_headers,
    handle_preflight,
    validate_body,
    validate_method,
)
from lesson_api.services.analyze.lesson_service import generate_lesson
from lesson_api.services.analyze.pipeline_runtime import ai_error_detail, config_error_message
from lesson_api.services.analyze.rate_limit import InMemoryRateLimitStore, RateLimiter


logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])
settings = get_settings()

# 405는 라우팅 단계가 아니라 validate_method에서 JSON 오류로 돌려준다.
_ROUTED_METHODS = ["POST", "OPTIONS", "GET", "PUT", "PATCH", "DELETE"]


@lru_cache(maxsize=1)
def _get_ai_service():
    return build_ai_service(settings)


def _require_ai_service():
    try:
        return _get_ai_service()
    except ValueError as exc:
        reason = ai_error_detail(exc)
        logger.error("ai service init failed: %s", reason)
        raise ServiceMisconfigured(config_error_message(reason)) from exc


@lru_cache(maxsize=1)
def _get_rate_limiter() -> RateLimiter:
    return RateLimiter(
        store=InMemoryRateLimitStore(window_sec=settings.rate_limit_window_sec),
        max_requests=settings.rate_limit_max_requests,
    )


async def _read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise BadRequest("Request body must be valid JSON") from exc


@router.api_route("/analyze-file", methods=_ROUTED_METHODS)
async def analyze_file(request: Request) -> Response:
    if request.method == "OPTIONS":
        return handle_preflight()
    validate_method(request.method)

    check_rate_limit(_get_rate_limiter(), client_key_from_headers(request.headers))

    check_content_length(request.headers, max_content_chars=settings.max_content_chars)
    body = await _read_json_body(request)
    payload = validate_body(body, max_content_chars=settings.max_content_chars)

    ai_service = _require_ai_service()
    lesson = await run_in_threadpool(
        generate_lesson,
        payload,
        ai_service=ai_service,
        prompt_budget_chars=settings.prompt_budget_chars,
    )
    return JSONResponse(content=lesson, headers=CORS_HEADERS)

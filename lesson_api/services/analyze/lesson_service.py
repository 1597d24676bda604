import logging
from typing import Any, Protocol

from pydantic import ValidationError

from lesson_api.domain.lesson import validate_lesson_document
from lesson_api.services.analyze.error_policy import UpstreamBadOutput
from lesson_api.services.analyze.ingress import AnalyzeRequest
from lesson_api.services.analyze.json_output import parse_json_text
from lesson_api.services.analyze.pipeline_runtime import ai_error_detail, classify_ai_failure
from lesson_api.services.analyze.prompts import build_lesson_prompts


logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate_text(self, *, system_prompt: str, user_prompt: str) -> str:
        ...


def generate_lesson(
    payload: AnalyzeRequest,
    *,
    ai_service: TextGenerator,
    prompt_budget_chars: int,
) -> dict[str, Any]:
    system_prompt, user_prompt = build_lesson_prompts(
        payload.content_text,
        payload.user_prompt,
        budget=prompt_budget_chars,
    )

    try:
        raw_text = ai_service.generate_text(system_prompt=system_prompt, user_prompt=user_prompt)
    except Exception as exc:
        failure = classify_ai_failure(exc)
        logger.error(
            "lesson generation failed status=%s reason=%s",
            failure.status_code,
            ai_error_detail(exc),
        )
        raise failure from exc

    try:
        parsed = parse_json_text(raw_text)
    except ValueError as exc:
        logger.error("model output is not a JSON object (%s); raw output: %r", exc, raw_text)
        raise UpstreamBadOutput() from exc

    try:
        return validate_lesson_document(parsed)
    except ValidationError as exc:
        logger.error(
            "model output violates lesson schema (%d errors: %s); raw output: %r",
            exc.error_count(),
            "; ".join(_summarize_errors(exc)),
            raw_text,
        )
        raise UpstreamBadOutput() from exc


def _summarize_errors(exc: ValidationError, limit: int = 5) -> list[str]:
    rows: list[str] = []
    for item in exc.errors()[:limit]:
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        rows.append(f"{location}: {item.get('msg', '')}")
    return rows

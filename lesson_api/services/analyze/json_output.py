import json
from typing import Any


def strip_code_fence(text: str) -> str:
    raw = text.strip()
    if raw.startswith("```"):
        lines = raw.splitlines()
        if len(lines) >= 2 and lines[-1].strip().startswith("```"):
            return "\n".join(lines[1:-1]).strip()
    return raw


def parse_json_text(text: str) -> dict[str, Any]:
    """Parse model output as one JSON object.

    Falls back to the span between the first "{" and the last "}" when the
    model wrapped the object in commentary. Raises ValueError otherwise.
    """
    cleaned = strip_code_fence(text or "")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = _salvage_object(cleaned)

    if not isinstance(parsed, dict):
        raise ValueError("ai_response_not_object")
    return parsed


def _salvage_object(text: str) -> Any:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("ai_response_not_json")
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError as exc:
        raise ValueError("ai_response_not_json") from exc

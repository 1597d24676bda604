import json
from typing import Any
from urllib import error, request


class ProviderRequestError(RuntimeError):
    """Upstream call failed; `status_code` is None when no HTTP response arrived."""

    def __init__(self, *, provider: str, status_code: int | None, message: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.message = " ".join(str(message or "").split())[:300]
        super().__init__(f"{provider}_request_failed:{status_code or 'network'}:{self.message}")


def post_json(
    endpoint: str,
    payload: dict[str, Any],
    *,
    provider: str,
    headers: dict[str, str] | None = None,
    timeout_sec: int = 60,
) -> dict[str, Any]:
    req = request.Request(
        endpoint,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json", **(headers or {})},
        method="POST",
    )

    try:
        with request.urlopen(req, timeout=timeout_sec) as response:
            body = response.read().decode("utf-8")
    except error.HTTPError as exc:
        raise ProviderRequestError(
            provider=provider,
            status_code=exc.code,
            message=_error_message_from_body(exc),
        ) from exc
    except (error.URLError, TimeoutError, OSError) as exc:  # pragma: no cover - network boundary
        raise ProviderRequestError(provider=provider, status_code=None, message=str(exc)) from exc

    try:
        decoded = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ProviderRequestError(
            provider=provider,
            status_code=None,
            message=f"{provider}_envelope_not_json",
        ) from exc
    if not isinstance(decoded, dict):
        raise ProviderRequestError(provider=provider, status_code=None, message=f"{provider}_envelope_not_object")
    return decoded


def _error_message_from_body(exc: error.HTTPError) -> str:
    try:
        raw = exc.read().decode("utf-8", errors="replace")
    except Exception:  # pragma: no cover - network boundary
        return str(exc.reason or exc)

    # Gemini/OpenAI 모두 {"error": {"message": "..."}} 형태로 오류를 돌려준다.
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return raw or str(exc.reason or exc)

    if isinstance(decoded, dict):
        detail = decoded.get("error")
        if isinstance(detail, dict) and isinstance(detail.get("message"), str):
            return detail["message"]
        if isinstance(detail, str):
            return detail
    return raw

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lesson_api.api.analyze import router as analyze_router
from lesson_api.core.config import get_settings
from lesson_api.core.logging_config import configure_logging
from lesson_api.services.analyze.error_policy import (
    AnalyzeError,
    MethodNotAllowed,
    build_error_payload,
    build_unexpected_error_payload,
)
from lesson_api.services.analyze.ingress import CORS_HEADERS


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mandarin Lesson API",
    version="0.1.0",
    description="Turns extracted document text into structured Mandarin lessons",
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok", "env": settings.env}


@app.exception_handler(AnalyzeError)
async def handle_analyze_error(_request: Request, exc: AnalyzeError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(exc.message),
        headers={**CORS_HEADERS, **exc.headers},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 라우팅 단계의 405도 같은 본문과 Allow 헤더로 맞춘다.
    if exc.status_code == MethodNotAllowed.status_code:
        return await handle_analyze_error(request, MethodNotAllowed())
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(exc.detail),
        headers={**CORS_HEADERS, **(exc.headers or {})},
    )


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=build_unexpected_error_payload(),
        headers=CORS_HEADERS,
    )


app.include_router(analyze_router)

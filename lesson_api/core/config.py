from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 공급자 선택(기본: gemini). 모델 목록은 앞에서부터 순서대로 폴백한다.
    env: str = "development"
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    ai_provider: Literal["gemini", "openai"] = "gemini"
    ai_request_timeout_sec: int = 60

    # 키 이름 하위호환: GEMINI_API_KEY 또는 GOOGLE_GENERATIVE_AI_API_KEY 둘 다 허용
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"),
    )
    gemini_models: list[str] = ["gemini-2.0-flash", "gemini-1.5-flash"]

    openai_api_key: str = ""
    openai_models: list[str] = ["gpt-4o-mini"]
    openai_base_url: str = "https://api.openai.com/v1"

    max_content_chars: int = Field(default=50_000, ge=1)
    prompt_budget_chars: int = Field(default=20_000, ge=15_000, le=25_000)

    rate_limit_window_sec: int = Field(default=60, ge=60, le=3600)
    rate_limit_max_requests: int = Field(default=5, ge=5, le=10)

    retry_max_attempts: int = Field(default=3, ge=1, le=5)
    retry_base_delay_sec: float = 1.0
    retry_backoff_exponent: float = 2.0
    retry_jitter_max_sec: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

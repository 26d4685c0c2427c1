"""Settings for the remote summarization (HuggingFace inference) client."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, NonNegativeInt, PositiveInt, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SummarizerSettings(BaseSettings):
    """Environment-driven configuration for the summarization stage."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    huggingface_api_key: Optional[SecretStr] = Field(
        None,
        alias="HUGGINGFACE_API_KEY",
        description="HuggingFace inference API token. 없으면 로컬 요약만 사용",
    )
    summarizer_model_url: str = Field(
        "https://api-inference.huggingface.co/models/facebook/bart-large-cnn",
        alias="SUMMARIZER_MODEL_URL",
        description="Summarization model endpoint",
    )
    summarizer_timeout_seconds: PositiveInt = Field(30, alias="SUMMARIZER_TIMEOUT_SECONDS", description="HTTP request timeout in seconds")
    summarizer_retry_max_attempts: NonNegativeInt = Field(
        1,
        alias="SUMMARIZER_RETRY_MAX_ATTEMPTS",
        description="일시 오류 시 추가 재시도 횟수",
    )
    summarizer_max_input_chars: PositiveInt = Field(
        4000,
        alias="SUMMARIZER_MAX_INPUT_CHARS",
        description="모델 입력으로 보낼 최대 문자 수",
    )
    summarizer_concurrency: PositiveInt = Field(5, alias="SUMMARIZER_CONCURRENCY", description="기사별 요약 동시 실행 수")

    @field_validator("huggingface_api_key")
    @classmethod
    def _blank_key_is_missing(cls, v: Optional[SecretStr]) -> Optional[SecretStr]:
        if v is None or not v.get_secret_value().strip():
            return None
        return v

    @property
    def has_credentials(self) -> bool:
        return self.huggingface_api_key is not None


@lru_cache()
def get_summarizer_settings() -> SummarizerSettings:
    try:
        return SummarizerSettings()
    except ValidationError as exc:
        raise RuntimeError(f"요약 설정 검증 실패: {exc}") from exc


def reset_summarizer_settings_cache() -> None:
    get_summarizer_settings.cache_clear()  # type: ignore[attr-defined]

"""Configuration models for the news ingestion service."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, Any, List, Literal, Optional, Set, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    BaseModel,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
    SecretStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError


DEFAULT_SEARCH_QUERIES: List[dict] = [
    {"query": "(open badge OR open badges)", "language": "eng"},
    {"query": '("micro-credential" OR "micro-credentials")', "language": "eng"},
    {"query": "(digital certification OR digital certifications)", "language": "eng"},
]

DEFAULT_RELEVANCE_KEYWORDS: List[str] = [
    "digital credential",
    "open badge",
    "micro-credential",
    "digital certification",
    "blockchain credential",
    "디지털 배지",
    "오픈배지",
    "디지털 자격",
]


class SearchQuery(BaseModel):
    """Fetch 순서를 결정하는 검색어/언어 쌍."""

    query: str = Field(..., description="업스트림 검색어.")
    language: str = Field("eng", description="업스트림 언어 코드 (예: eng, kor).")

    @field_validator("query")
    @classmethod
    def _strip_query(cls, value: str) -> str:
        query = value.strip()
        if not query:
            raise ValueError("query는 공백일 수 없습니다.")
        return query

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, value: str) -> str:
        language = value.strip().lower()
        if not language:
            raise ValueError("language는 공백일 수 없습니다.")
        return language


def _parse_json_list(value: Any, env_name: str) -> List[Any]:
    if value in (None, "", []):
        return []
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{env_name}는 JSON 배열이어야 합니다.") from exc
        if not isinstance(parsed, list):
            raise ValueError(f"{env_name}는 JSON 배열이어야 합니다.")
        return parsed
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"{env_name}는 리스트 형태여야 합니다.")


class Settings(BaseSettings):
    """뉴스 수집 파이프라인 환경 설정."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    app_env: str = Field("development", alias="APP_ENV", description="실행 환경 (development/production).")
    news_provider: Literal["gdelt", "news_api"] = Field(
        "gdelt",
        alias="NEWS_PROVIDER",
        description="업스트림 뉴스 제공자.",
    )
    gdelt_api_url: str = Field(
        "https://api.gdeltproject.org/api/v2/doc/doc",
        alias="GDELT_API_URL",
        description="GDELT DOC 2.0 엔드포인트.",
    )
    news_api_key: Optional[SecretStr] = Field(None, alias="NEWS_API_KEY", description="뉴스 API 인증 키.")
    news_api_endpoint: str = Field(
        "https://newsapi.org/v2/everything",
        alias="NEWS_API_ENDPOINT",
        description="News API 엔드포인트",
    )
    search_queries: Annotated[List[SearchQuery], NoDecode] = Field(
        default_factory=lambda: [SearchQuery(**item) for item in DEFAULT_SEARCH_QUERIES],
        alias="SEARCH_QUERIES",
        description="JSON 배열 형태의 검색어/언어 목록 (순서대로 수집).",
    )
    page_size: PositiveInt = Field(50, alias="PAGE_SIZE", description="요청당 최대 기사 수")
    request_delay_seconds: NonNegativeFloat = Field(
        1.0,
        alias="REQUEST_DELAY_SECONDS",
        description="모든 업스트림 요청 전 고정 대기 시간(초).",
    )
    request_timeout_seconds: PositiveInt = Field(10, alias="REQUEST_TIMEOUT_SECONDS", description="업스트림 타임아웃(초)")
    max_retries: NonNegativeInt = Field(3, alias="MAX_RETRIES", description="업스트림 최대 재시도 횟수")
    retry_delay_seconds: NonNegativeFloat = Field(2.0, alias="RETRY_DELAY_SECONDS", description="재시도 간 고정 대기(초)")
    relevance_filter: Literal["language", "keyword"] = Field(
        "language",
        alias="RELEVANCE_FILTER",
        description="관련성 필터 전략.",
    )
    relevance_keywords: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_RELEVANCE_KEYWORDS),
        alias="RELEVANCE_KEYWORDS",
        description="키워드 필터에 사용할 키워드/구문 (JSON 배열).",
    )
    empty_result_policy: Literal["empty", "error"] = Field(
        "empty",
        alias="EMPTY_RESULT_POLICY",
        description="수집 결과가 0건일 때의 처리 방식.",
    )
    summary_enabled: bool = Field(True, alias="SUMMARY_ENABLED", description="요약 단계 실행 여부.")
    enrichment_enabled: bool = Field(True, alias="ENRICHMENT_ENABLED", description="기사 본문 크롤링 여부.")
    enrichment_concurrency: PositiveInt = Field(5, alias="ENRICHMENT_CONCURRENCY", description="본문 크롤링 동시 실행 수.")
    enrichment_timeout_seconds: PositiveInt = Field(
        10,
        alias="ENRICHMENT_TIMEOUT_SECONDS",
        description="본문 크롤링 타임아웃(초)",
    )
    display_timezone: str = Field("Asia/Seoul", alias="DISPLAY_TIMEZONE", description="날짜 표시/일일 요약 기준 시간대.")
    database_url: str = Field(
        "sqlite:///./var/storage/news.db",
        alias="DATABASE_URL",
        description="SQLAlchemy 연결 문자열.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="로그 레벨.")
    log_json: bool = Field(False, alias="LOG_JSON", description="로그를 JSON 형식으로 출력할지 여부.")
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS 허용 오리진 (JSON 배열).",
    )
    redis_url: str = Field(
        "redis://localhost:6379/0",
        alias="INGESTION_REDIS_URL",
        description="Celery 브로커/백엔드 Redis DSN.",
    )
    ingestion_interval_minutes: NonNegativeInt = Field(
        0,
        alias="INGESTION_INTERVAL_MINUTES",
        description="주기적 수집 간격(분). 0이면 스케줄 없음.",
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @field_validator("search_queries", mode="before")
    @classmethod
    def _parse_search_queries(cls, value: Any) -> List[Any]:
        return _parse_json_list(value, "SEARCH_QUERIES")

    @field_validator("search_queries")
    @classmethod
    def _validate_unique_queries(cls, value: List[SearchQuery]) -> List[SearchQuery]:
        seen: Set[Tuple[str, str]] = set()
        for item in value:
            key = (item.query, item.language)
            if key in seen:
                raise ValueError(f"중복된 검색어 항목이 존재합니다: {item.query}/{item.language}")
            seen.add(key)
        return value

    @field_validator("relevance_keywords", "cors_allow_origins", mode="before")
    @classmethod
    def _parse_string_list(cls, value: Any, info: ValidationInfo) -> List[Any]:
        return _parse_json_list(value, info.field_name.upper())

    @field_validator("relevance_keywords")
    @classmethod
    def _clean_keywords(cls, value: List[str]) -> List[str]:
        return [kw.strip() for kw in value if kw and kw.strip()]

    @field_validator("page_size")
    @classmethod
    def _validate_page_size(cls, v: int) -> int:
        if v > 250:
            raise ValueError("PAGE_SIZE는 250 이하여야 합니다.")
        return v

    @field_validator("display_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"알 수 없는 시간대입니다: {value}") from exc
        return value

    @field_validator("database_url")
    @classmethod
    def _validate_database_url(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("DATABASE_URL은 유효한 DSN 문자열이어야 합니다.")
        return value


@lru_cache()
def get_settings() -> Settings:
    """환경 변수를 기준으로 Settings 인스턴스를 반환한다."""
    try:
        return Settings()
    except (ValidationError, SettingsError) as exc:
        raise RuntimeError(f"환경 변수 검증에 실패했습니다: {exc}") from exc


def reset_settings_cache() -> None:
    """Settings LRU 캐시를 초기화한다 (테스트 용도)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]

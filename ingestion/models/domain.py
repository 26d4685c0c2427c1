"""Domain DTOs for the ingestion pipeline."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

KOREAN = "Korean"
ENGLISH = "English"
UNKNOWN_SOURCE = "Unknown"


class ArticleSource(BaseModel):
    """기사 출처(언론사) 정보."""

    name: str = UNKNOWN_SOURCE
    country: Optional[str] = None


class Article(BaseModel):
    """업스트림 제공자와 무관한 정규화된 기사 표현."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    content: Optional[str] = None
    url: str = Field(..., description="절대 URI. lowercase(url)이 중복 판별 키.")
    url_to_image: Optional[str] = Field(None, alias="urlToImage")
    published_at: str = Field("", alias="publishedAt", description="YYYY-MM-DDTHH:MM:SSZ 또는 빈 문자열")
    source: ArticleSource = Field(default_factory=ArticleSource)
    language: str = ENGLISH
    summary: Optional[str] = None

    @field_validator("title", "url")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("빈 문자열은 허용되지 않습니다.")
        return v

    @property
    def identity(self) -> str:
        return self.url.lower()


class DailySummary(BaseModel):
    """날짜별 수집 요약 (날짜당 1건, 나중 쓰기가 우선)."""

    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    article_count: NonNegativeInt = 0
    source_count: NonNegativeInt = 0
    summary: str = ""


class ArticleStats(BaseModel):
    total_articles: NonNegativeInt = 0
    total_sources: NonNegativeInt = 0
    earliest_article: Optional[str] = None
    latest_article: Optional[str] = None

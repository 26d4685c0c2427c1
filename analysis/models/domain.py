"""DTO/스키마: 요약 단계의 출력 정의."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, NonNegativeInt, field_validator

from ingestion.models.domain import Article


class TopicCount(BaseModel):
    """주제 버킷별 기사 수. 한 기사가 여러 버킷에 포함될 수 있다."""

    topic: str
    count: NonNegativeInt
    percentage: float = Field(..., ge=0.0)


class SummaryResult(BaseModel):
    """요약 결과. method는 원격 요약 성공 여부를 나타낸다."""

    summary: str
    method: Literal["remote", "fallback"] = "fallback"

    @field_validator("summary")
    @classmethod
    def _summary_trim(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("summary는 공백일 수 없습니다.")
        return s


class SummarizedBatch(BaseModel):
    """요약 단계 결과: 요약 + 본문/개별 요약이 보강된 기사 목록."""

    result: SummaryResult
    articles: List[Article] = Field(default_factory=list)

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ingestion.models.domain import Article

SourceLabel = Literal["GDELT", "NewsAPI"]


class Analysis(BaseModel):
    summary: str


class NewsResponse(BaseModel):
    articles: List[Article] = Field(default_factory=list)
    analysis: Optional[Analysis] = None


class SourceResponse(BaseModel):
    source: SourceLabel


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, HTTPException

from analysis.repositories.summaries import get_daily_summary
from ingestion.models.domain import Article, ArticleStats, DailySummary
from ingestion.repositories.articles import (
    get_articles_by_date,
    get_articles_by_topic,
    get_stats,
    search_articles,
)
from ingestion.tasks.collect import run_ingestion_cycle

from .dependencies import ServicesDep, SessionDep
from .models import Analysis, NewsResponse, SourceResponse

router = APIRouter(prefix="/api")


@router.get("/news", responses={200: {"model": NewsResponse}})
async def fetch_news_route(services: ServicesDep) -> dict:
    result = await run_ingestion_cycle(services)
    payload = NewsResponse(
        articles=result.articles,
        analysis=Analysis(summary=result.analysis.summary) if result.analysis else None,
    )
    # analysis 없으면 키 자체를 생략
    return payload.model_dump(by_alias=True, exclude={"analysis"} if payload.analysis is None else None)


@router.get("/news/history/{date}", response_model=list[Article])
def news_history_route(date: dt.date, session: SessionDep) -> list[Article]:
    return get_articles_by_date(session, date)


@router.get("/news/topic/{topic}", response_model=list[Article])
def news_by_topic_route(topic: str, session: SessionDep) -> list[Article]:
    return get_articles_by_topic(session, topic)


@router.get("/news/search/{keyword}", response_model=list[Article])
def search_news_route(keyword: str, session: SessionDep) -> list[Article]:
    return search_articles(session, keyword)


@router.get("/news/stats", response_model=ArticleStats)
def news_stats_route(session: SessionDep) -> ArticleStats:
    return get_stats(session)


@router.get("/news/summary/{date}", response_model=DailySummary)
def daily_summary_route(date: dt.date, session: SessionDep) -> DailySummary:
    summary = get_daily_summary(session, date)
    if summary is None:
        raise HTTPException(status_code=404, detail="Summary not found.")
    return summary


@router.get("/source", response_model=SourceResponse)
def source_route(services: ServicesDep) -> SourceResponse:
    return SourceResponse(source=services.connector.label)

"""Ingestion cycle: fetch → normalize → filter → dedup/sort → summarize → persist."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from celery import shared_task

from analysis.models.domain import SummaryResult
from analysis.repositories.summaries import save_daily_summary
from analysis.tasks.summarize import summarize_articles
from ingestion.connectors.base import BaseConnector
from ingestion.models.domain import Article, DailySummary
from ingestion.repositories.articles import save_article
from ingestion.services.container import NewsServices, build_services
from ingestion.services.deduplicator import dedupe_and_sort
from ingestion.services.relevance import RelevanceFilter
from ingestion.settings import SearchQuery
from ingestion.utils.logging import bind_logger


class EmptyResultError(Exception):
    """수집 결과가 0건이고 EMPTY_RESULT_POLICY=error 인 경우."""


@dataclass
class CycleResult:
    articles: List[Article]
    analysis: Optional[SummaryResult] = None
    trace_id: Optional[str] = None


async def collect_articles(
    connector: BaseConnector,
    queries: Iterable[SearchQuery],
    relevance_filter: RelevanceFilter,
    *,
    trace_id: Optional[str] = None,
) -> List[Article]:
    """검색어 순서대로 순차 수집. 쌍별 순서를 유지하며 누적한다."""
    logger = bind_logger(__name__, trace_id=trace_id, source=connector.source)
    collected: List[Article] = []
    for query in queries:
        records = await connector.fetch(query)
        accepted = 0
        for record in records:
            article = connector.adapter.normalize(record)
            if article is None or not relevance_filter.accepts(article):
                continue
            collected.append(article)
            accepted += 1
        logger.info(
            "collect.query",
            extra={
                "query": query.query,
                "language": query.language,
                "raw": len(records),
                "accepted": accepted,
                "rejected": len(records) - accepted,
            },
        )
    return collected


def _persist(services: NewsServices, articles: List[Article], analysis: Optional[SummaryResult]) -> None:
    cycle_date = datetime.now(ZoneInfo(services.settings.display_timezone)).date()
    with services.session() as session:
        for article in articles:
            save_article(session, article)
        if analysis is not None:
            save_daily_summary(
                session,
                DailySummary(
                    date=cycle_date,
                    article_count=len(articles),
                    source_count=len({a.source.name for a in articles}),
                    summary=analysis.summary,
                ),
            )


async def run_ingestion_cycle(services: NewsServices) -> CycleResult:
    settings = services.settings
    trace_id = str(uuid.uuid4())
    logger = bind_logger(__name__, trace_id=trace_id)
    logger.info(
        "collect.start",
        extra={"provider": settings.news_provider, "queries": len(settings.search_queries)},
    )

    fetched = await collect_articles(
        services.connector, settings.search_queries, services.relevance_filter, trace_id=trace_id
    )
    articles = dedupe_and_sort(fetched)
    if not articles:
        logger.warning("collect.empty", extra={"policy": settings.empty_result_policy})
        if settings.empty_result_policy == "error":
            raise EmptyResultError("수집된 기사가 없습니다.")
        return CycleResult(articles=[], trace_id=trace_id)

    analysis: Optional[SummaryResult] = None
    if settings.summary_enabled:
        batch = await summarize_articles(
            articles,
            remote=services.summarizer,
            enricher=services.enricher,
            concurrency=services.summarizer.concurrency,
            tz_name=settings.display_timezone,
            trace_id=trace_id,
        )
        articles, analysis = batch.articles, batch.result

    # 동기 DB I/O는 이벤트 루프 밖에서 실행
    await asyncio.to_thread(_persist, services, articles, analysis)
    logger.info(
        "collect.saved",
        extra={
            "fetched": len(fetched),
            "unique": len(articles),
            "summary_method": analysis.method if analysis else None,
        },
    )
    return CycleResult(articles=articles, analysis=analysis, trace_id=trace_id)


@shared_task(name="ingestion.tasks.collect.run_ingestion_cycle")
def run_ingestion_cycle_task() -> int:  # pragma: no cover - wrapper
    services = build_services()
    try:
        services.ensure_schema()
        result = asyncio.run(run_ingestion_cycle(services))
    finally:
        services.close()
    return len(result.articles)

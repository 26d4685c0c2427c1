"""Summarization stage: enrichment, remote summaries and the local fallback."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Protocol, Sequence

from analysis.models.domain import SummarizedBatch, SummaryResult
from analysis.prompts.templates import (
    ARTICLE_SUMMARY_MAX_LENGTH,
    ARTICLE_SUMMARY_MIN_LENGTH,
    FINAL_SUMMARY_MAX_LENGTH,
    FINAL_SUMMARY_MIN_LENGTH,
    build_article_input,
    build_combined_input,
)
from analysis.services.fallback import DEFAULT_TIMEZONE, build_fallback_summary
from ingestion.models.domain import Article
from ingestion.services.enrichment import ContentEnricher
from ingestion.utils.logging import bind_logger


class RemoteSummarizer(Protocol):
    @property
    def available(self) -> bool: ...

    async def summarize(self, text: str, *, max_length: int, min_length: int) -> Optional[str]: ...


async def _summarize_each(
    articles: Sequence[Article], remote: RemoteSummarizer, concurrency: int
) -> List[Article]:
    sem = asyncio.Semaphore(max(1, concurrency))

    async def _one(article: Article) -> Article:
        text = build_article_input(article)
        if not text:
            return article
        async with sem:
            summary = await remote.summarize(
                text, max_length=ARTICLE_SUMMARY_MAX_LENGTH, min_length=ARTICLE_SUMMARY_MIN_LENGTH
            )
        return article.model_copy(update={"summary": summary}) if summary else article

    results = await asyncio.gather(*(_one(a) for a in articles), return_exceptions=True)
    return [
        original if isinstance(result, BaseException) else result
        for original, result in zip(articles, results)
    ]


async def summarize_articles(
    articles: Sequence[Article],
    *,
    remote: RemoteSummarizer,
    enricher: Optional[ContentEnricher] = None,
    concurrency: int = 5,
    tz_name: str = DEFAULT_TIMEZONE,
    trace_id: Optional[str] = None,
) -> SummarizedBatch:
    """원격 요약을 시도하고, 불가능한 단계에서는 로컬 요약으로 대체한다."""
    logger = bind_logger(__name__, trace_id=trace_id)
    enriched = await enricher.enrich(articles) if enricher is not None else list(articles)

    def _fallback(reason: str, items: Sequence[Article]) -> SummarizedBatch:
        logger.info("summarize.fallback", extra={"reason": reason, "articles": len(items)})
        return SummarizedBatch(result=build_fallback_summary(items, tz_name=tz_name), articles=list(items))

    if not remote.available:
        return _fallback("no_credentials", enriched)

    summarized = await _summarize_each(enriched, remote, concurrency)
    combined = build_combined_input(summarized)
    if not combined:
        return _fallback("no_article_summaries", summarized)

    final = await remote.summarize(
        combined, max_length=FINAL_SUMMARY_MAX_LENGTH, min_length=FINAL_SUMMARY_MIN_LENGTH
    )
    if not final:
        return _fallback("final_summary_unavailable", summarized)

    logger.info(
        "summarize.remote",
        extra={"articles": len(summarized), "summarized": sum(1 for a in summarized if a.summary)},
    )
    return SummarizedBatch(result=SummaryResult(summary=final, method="remote"), articles=summarized)

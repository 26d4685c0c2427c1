"""Deterministic local digest used when remote summarization is unavailable.

The digest is written in Korean and always has the same section order:
header (counts and keywords), top sources, recent headlines, publication
date range, topic distribution, and optionally excerpts of articles whose
body was fetched.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from analysis.models.domain import SummaryResult
from analysis.services.keywords import extract_keywords
from analysis.services.topics import topic_distribution
from ingestion.models.domain import Article
from ingestion.services.deduplicator import parse_published_at, sort_by_recency

DEFAULT_TIMEZONE = "Asia/Seoul"
TOP_SOURCES = 5
RECENT_HEADLINES = 5
CONTENT_EXCERPTS = 5
EXCERPT_CHARS = 300
UNKNOWN_DATE = "날짜 미상"
UNKNOWN_RANGE = "알 수 없음"


def format_korean_date(value: datetime, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """``2024. 1. 15.`` 형식 (표시 시간대 기준)."""
    try:
        local = value.astimezone(ZoneInfo(tz_name))
    except OverflowError:
        # 9999-12-31 근처는 시간대 변환이 불가하므로 UTC 날짜 그대로 표시
        local = value
    return f"{local.year}. {local.month}. {local.day}."


def _article_date(article: Article, tz_name: str) -> str:
    parsed = parse_published_at(article.published_at)
    return format_korean_date(parsed, tz_name) if parsed else UNKNOWN_DATE


def _top_sources(articles: Sequence[Article]) -> List[str]:
    counts = Counter(a.source.name for a in articles)
    return [f"{name}({count}건)" for name, count in counts.most_common(TOP_SOURCES)]


def _date_range(articles: Sequence[Article], tz_name: str) -> str:
    dates = [d for d in (parse_published_at(a.published_at) for a in articles) if d is not None]
    if not dates:
        return UNKNOWN_RANGE
    return f"{format_korean_date(min(dates), tz_name)} ~ {format_korean_date(max(dates), tz_name)}"


def _content_section(articles: Sequence[Article], tz_name: str) -> Optional[str]:
    with_content = [a for a in articles if a.content][:CONTENT_EXCERPTS]
    if not with_content:
        return None
    entries = [
        f"- {a.title} ({a.source.name}, {_article_date(a, tz_name)}):\n  {a.content[:EXCERPT_CHARS]}..."
        for a in with_content
    ]
    return "주요 기사 내용:\n" + "\n\n".join(entries)


def build_fallback_summary(articles: Sequence[Article], *, tz_name: str = DEFAULT_TIMEZONE) -> SummaryResult:
    if not articles:
        raise ValueError("요약할 기사가 없습니다.")

    total = len(articles)
    source_count = len({a.source.name for a in articles})
    keywords = ", ".join(extract_keywords(articles))
    recent = sort_by_recency(articles)[:RECENT_HEADLINES]
    headlines = "\n".join(
        f'- "{a.title}" ({a.source.name}, {_article_date(a, tz_name)})' for a in recent
    )
    topics = "\n".join(
        f"- {t.topic}: {t.count}건 ({t.percentage:.1f}%)" for t in topic_distribution(articles)
    )

    sections = [
        f"이번 뉴스 모음에서는 {total}개의 관련 기사를 수집했습니다. "
        f"{source_count}개의 다양한 언론사에서 보도했으며, 주요 주제는 {keywords}입니다.",
        f"주요 언론사로는 {', '.join(_top_sources(articles))} 등이 있으며, "
        f"최근 주요 보도로는:\n{headlines} 등이 있습니다.",
        f"기사 발행 기간: {_date_range(articles, tz_name)}",
        f"주제별 기사 분포:\n{topics}",
    ]
    content = _content_section(articles, tz_name)
    if content:
        sections.append(content)
    return SummaryResult(summary="\n\n".join(sections), method="fallback")

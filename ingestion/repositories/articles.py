"""Repositories for persisting and querying articles."""

from __future__ import annotations

import datetime as dt
from typing import List, Union

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ingestion.db.models import ArticleRecord
from ingestion.models.domain import ENGLISH, UNKNOWN_SOURCE, Article, ArticleSource, ArticleStats


class StorageError(Exception):
    """Persistence failure surfaced to callers (API → 500)."""


def _to_domain(record: ArticleRecord) -> Article:
    return Article(
        title=record.title,
        description=record.description or "",
        content=record.content,
        url=record.url,
        url_to_image=record.url_to_image,
        published_at=record.published_at or "",
        source=ArticleSource(name=record.source_name or UNKNOWN_SOURCE, country=record.source_country),
        language=record.language or ENGLISH,
        summary=record.summary,
    )


def _apply(record: ArticleRecord, article: Article) -> None:
    record.title = article.title
    record.description = article.description
    record.content = article.content
    record.url_to_image = article.url_to_image
    record.source_name = article.source.name
    record.source_country = article.source.country
    record.language = article.language
    record.summary = article.summary
    record.published_at = article.published_at


def save_article(session: Session, article: Article) -> Article:
    """url 기준 upsert. 마지막 쓰기가 우선."""
    try:
        record = session.execute(
            select(ArticleRecord).where(ArticleRecord.url == article.url)
        ).scalar_one_or_none()
        if record is None:
            record = ArticleRecord(url=article.url)
            session.add(record)
        _apply(record, article)
        session.flush()
    except SQLAlchemyError as exc:
        raise StorageError(f"기사 저장 실패: {article.url}") from exc
    return _to_domain(record)


def _newest_first(stmt):
    return stmt.order_by(ArticleRecord.published_at.desc(), ArticleRecord.id.desc())


def _run(session: Session, stmt) -> List[Article]:
    try:
        rows = session.execute(stmt).scalars().all()
    except SQLAlchemyError as exc:
        raise StorageError("기사 조회 실패") from exc
    return [_to_domain(r) for r in rows]


def get_articles_by_date(session: Session, date: Union[dt.date, str]) -> List[Article]:
    """해당 날짜(YYYY-MM-DD)로 시작하는 publishedAt을 가진 기사, 최신순."""
    prefix = date.isoformat() if isinstance(date, dt.date) else str(date).strip()
    stmt = select(ArticleRecord).where(ArticleRecord.published_at.like(f"{prefix}%"))
    return _run(session, _newest_first(stmt))


def _text_match(text: str):
    pattern = f"%{text.strip()}%"
    return or_(
        ArticleRecord.title.ilike(pattern),
        ArticleRecord.description.ilike(pattern),
        ArticleRecord.content.ilike(pattern),
    )


def get_articles_by_topic(session: Session, topic: str) -> List[Article]:
    return _run(session, _newest_first(select(ArticleRecord).where(_text_match(topic))))


def search_articles(session: Session, keyword: str) -> List[Article]:
    return _run(session, _newest_first(select(ArticleRecord).where(_text_match(keyword))))


def get_stats(session: Session) -> ArticleStats:
    """총 기사/언론사 수와 가장 이른/늦은 발행일 (빈 날짜 제외)."""
    dated = ArticleRecord.published_at.is_not(None) & (ArticleRecord.published_at != "")
    try:
        total, sources = session.execute(
            select(func.count(ArticleRecord.id), func.count(func.distinct(ArticleRecord.source_name)))
        ).one()
        earliest, latest = session.execute(
            select(func.min(ArticleRecord.published_at), func.max(ArticleRecord.published_at)).where(dated)
        ).one()
    except SQLAlchemyError as exc:
        raise StorageError("통계 조회 실패") from exc
    return ArticleStats(
        total_articles=total or 0,
        total_sources=sources or 0,
        earliest_article=earliest,
        latest_article=latest,
    )

"""Repository helpers for DailySummary."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ingestion.db.models import DailySummaryRecord
from ingestion.models.domain import DailySummary
from ingestion.repositories.articles import StorageError


def save_daily_summary(session: Session, summary: DailySummary) -> DailySummary:
    """날짜 기준 upsert."""
    try:
        entity = session.execute(
            select(DailySummaryRecord).where(DailySummaryRecord.date == summary.date)
        ).scalar_one_or_none()
        if entity is None:
            entity = DailySummaryRecord(date=summary.date)
            session.add(entity)
        entity.article_count = summary.article_count
        entity.source_count = summary.source_count
        entity.summary = summary.summary
        session.flush()
    except SQLAlchemyError as exc:
        raise StorageError(f"일일 요약 저장 실패: {summary.date}") from exc
    return DailySummary.model_validate(entity)


def get_daily_summary(session: Session, date: dt.date) -> Optional[DailySummary]:
    try:
        entity = session.execute(
            select(DailySummaryRecord).where(DailySummaryRecord.date == date)
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise StorageError(f"일일 요약 조회 실패: {date}") from exc
    return DailySummary.model_validate(entity) if entity is not None else None

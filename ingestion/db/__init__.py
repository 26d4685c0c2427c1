"""Database utilities for the news service."""

from .models import ArticleRecord, Base, DailySummaryRecord  # noqa: F401
from .session import create_db_engine, create_session_factory, ensure_schema, session_scope  # noqa: F401

__all__ = [
    "ArticleRecord",
    "Base",
    "DailySummaryRecord",
    "create_db_engine",
    "create_session_factory",
    "ensure_schema",
    "session_scope",
]

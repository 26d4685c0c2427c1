"""URL-based deduplication and recency ordering of articles."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ingestion.models.domain import Article

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    """Parse a canonical (or ``YYYY-MM-DD…``) timestamp; ``None`` if unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def recency_key(article: Article) -> datetime:
    return parse_published_at(article.published_at) or EPOCH


def dedupe_articles(articles: Iterable[Article]) -> List[Article]:
    """Keep the first occurrence of each ``lowercase(url)``, order preserved."""
    seen: set[str] = set()
    unique: List[Article] = []
    for article in articles:
        key = article.identity
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def sort_by_recency(articles: Iterable[Article]) -> List[Article]:
    """Stable newest-first sort; missing/unparseable dates sort as oldest."""
    return sorted(articles, key=recency_key, reverse=True)


def dedupe_and_sort(articles: Iterable[Article]) -> List[Article]:
    return sort_by_recency(dedupe_articles(articles))

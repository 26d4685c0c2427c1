"""Frequency-based keyword extraction for the fallback digest."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List

from ingestion.models.domain import Article

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "is", "are", "was", "were", "be", "been", "being", "have",
        "has", "had", "do", "does", "did", "will", "would", "shall", "should",
        "can", "could", "may", "might", "must",
    }
)
MIN_TOKEN_LENGTH = 4


def article_text(article: Article) -> str:
    """제목 + 본문 (본문이 없으면 제목만)."""
    if article.content:
        return f"{article.title} {article.content}"
    return article.title


def tokenize(text: str) -> List[str]:
    return [
        token
        for token in text.lower().split()
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]


def extract_keywords(articles: Iterable[Article], limit: int = 5) -> List[str]:
    """빈도 상위 키워드. 동률은 먼저 등장한 순서."""
    counter: Counter[str] = Counter()
    for article in articles:
        counter.update(tokenize(article_text(article)))
    return [word for word, _ in counter.most_common(limit)]

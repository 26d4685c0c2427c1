"""Pluggable relevance filters applied to normalized articles."""

from __future__ import annotations

from typing import Iterable, Protocol

from ingestion.models.domain import ENGLISH, KOREAN, Article
from ingestion.services.normalizer import looks_english, looks_korean
from ingestion.settings import Settings
from ingestion.utils.logging import get_logger

logger = get_logger(__name__)

HTTP_SCHEMES = ("http://", "https://")


class RelevanceFilter(Protocol):
    name: str

    def accepts(self, article: Article) -> bool: ...  # noqa: D401


class LanguageRelevanceFilter:
    """Scheme + language + content gate used by the GDELT pipeline."""

    name = "language"

    def accepts(self, article: Article) -> bool:
        if not article.url.startswith(HTTP_SCHEMES):
            logger.debug("relevance.rejected", extra={"reason": "scheme", "url": article.url})
            return False

        is_korean = article.language == KOREAN or looks_korean(
            article.title, article.description, None, article.url
        )
        is_english = article.language == ENGLISH or looks_english(None, article.url)
        if not (is_korean or is_english):
            logger.debug("relevance.rejected", extra={"reason": "language", "url": article.url})
            return False

        # title is never empty after normalization, so this always holds
        return bool(article.description) or bool(article.title)


class KeywordRelevanceFilter:
    """Accept articles whose text mentions at least one configured keyword."""

    name = "keyword"

    def __init__(self, keywords: Iterable[str]) -> None:
        self._keywords = tuple(kw.lower() for kw in keywords if kw and kw.strip())

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    def accepts(self, article: Article) -> bool:
        text = f"{article.title} {article.description} {article.content or ''}".lower()
        matched = any(kw in text for kw in self._keywords)
        if not matched:
            logger.debug("relevance.rejected", extra={"reason": "keyword", "url": article.url})
        return matched


def build_relevance_filter(settings: Settings) -> RelevanceFilter:
    if settings.relevance_filter == "keyword":
        return KeywordRelevanceFilter(settings.relevance_keywords)
    return LanguageRelevanceFilter()

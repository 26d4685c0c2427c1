"""요약 모델 입력 텍스트 빌더.

기사별 요약 입력은 본문(없으면 설명)이며, 최종 요약 입력은 기사별 요약을
``Title: …\\nSummary: …`` 블록으로 이어 붙인 텍스트다.
"""

from __future__ import annotations

from typing import Iterable

from ingestion.models.domain import Article

ARTICLE_SUMMARY_MAX_LENGTH = 150
ARTICLE_SUMMARY_MIN_LENGTH = 30
FINAL_SUMMARY_MAX_LENGTH = 500
FINAL_SUMMARY_MIN_LENGTH = 100


def build_article_input(article: Article) -> str:
    return article.content or article.description or ""


def build_combined_input(articles: Iterable[Article]) -> str:
    """요약이 있는 기사만 이어 붙인다. 하나도 없으면 빈 문자열."""
    return "".join(
        f"Title: {a.title}\nSummary: {a.summary}\n\n" for a in articles if a.summary
    )

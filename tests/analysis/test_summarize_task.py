from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from analysis.tasks.summarize import summarize_articles
from ingestion.models.domain import Article
from ingestion.services.enrichment import ContentEnricher


class FakeRemote:
    """Records calls; returns canned summaries keyed by max_length."""

    def __init__(self, *, available: bool = True, per_article: Optional[str] = "short", final: Optional[str] = "final digest"):
        self._available = available
        self._per_article = per_article
        self._final = final
        self.calls: List[Tuple[str, int, int]] = []

    @property
    def available(self) -> bool:
        return self._available

    async def summarize(self, text: str, *, max_length: int, min_length: int) -> Optional[str]:
        self.calls.append((text, max_length, min_length))
        if max_length == 150:
            return f"{self._per_article}:{text[:10]}" if self._per_article else None
        return self._final


def _articles() -> List[Article]:
    return [
        Article(title="A", url="https://x.com/a", description="desc a"),
        Article(title="B", url="https://x.com/b", description="desc b", content="body b"),
    ]


@pytest.mark.asyncio
async def test_remote_path_summarizes_each_then_combines():
    remote = FakeRemote()

    batch = await summarize_articles(_articles(), remote=remote, concurrency=2)

    assert batch.result.method == "remote"
    assert batch.result.summary == "final digest"
    assert [a.summary for a in batch.articles] == ["short:desc a", "short:body b"]
    per_article = sorted(c[0] for c in remote.calls if c[1] == 150)
    assert per_article == ["body b", "desc a"]
    final_text, max_len, min_len = remote.calls[-1]
    assert (max_len, min_len) == (500, 100)
    assert final_text == "Title: A\nSummary: short:desc a\n\nTitle: B\nSummary: short:body b\n\n"


@pytest.mark.asyncio
async def test_unavailable_remote_uses_fallback_over_enriched_articles():
    async def fetcher(url: str) -> str:
        return "<article>" + ("Fetched body text about open badges. " * 5) + "</article>"

    remote = FakeRemote(available=False)

    batch = await summarize_articles(_articles(), remote=remote, enricher=ContentEnricher(fetcher=fetcher))

    assert remote.calls == []
    assert batch.result.method == "fallback"
    assert "주요 기사 내용:" in batch.result.summary
    assert all(a.content.startswith("Fetched body") for a in batch.articles)


@pytest.mark.asyncio
async def test_no_article_summaries_falls_back():
    remote = FakeRemote(per_article=None)

    batch = await summarize_articles(_articles(), remote=remote)

    assert batch.result.method == "fallback"
    assert all(c[1] == 150 for c in remote.calls)
    assert batch.result.summary.startswith("이번 뉴스 모음에서는 2개의 관련 기사를")


@pytest.mark.asyncio
async def test_final_summary_failure_falls_back_but_keeps_article_summaries():
    remote = FakeRemote(final=None)

    batch = await summarize_articles(_articles(), remote=remote)

    assert batch.result.method == "fallback"
    assert batch.articles[0].summary == "short:desc a"

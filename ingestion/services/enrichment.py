"""Best-effort article body extraction and bounded enrichment fan-out."""

from __future__ import annotations

import asyncio
import re
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup

from ingestion.connectors.base import DEFAULT_HEADERS
from ingestion.models.domain import Article
from ingestion.utils.logging import get_logger

logger = get_logger(__name__)

ARTICLE_SELECTORS: Sequence[str] = (
    "article",
    ".article-content",
    ".article-body",
    ".story-content",
    ".post-content",
    "main",
    '[role="main"]',
    ".content",
    "#content",
)
MIN_SELECTOR_CHARS = 100
MIN_PARAGRAPH_CHARS = 50

_WHITESPACE_RE = re.compile(r"\s+")

# url -> html text; injected for tests/offline runs
HtmlFetcher = Callable[[str], Awaitable[str]]


def clean_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_body(html: str) -> Optional[str]:
    """Pick the article body out of ``html`` using common page structures."""
    soup = BeautifulSoup(html, "html.parser")
    for selector in ARTICLE_SELECTORS:
        nodes = soup.select(selector)
        if not nodes:
            continue
        text = " ".join(node.get_text(" ", strip=True) for node in nodes).strip()
        if len(text) > MIN_SELECTOR_CHARS:
            return clean_text(text)

    paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
    body = "\n\n".join(p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS)
    return clean_text(body) or None


class ContentEnricher:
    """Fetch article pages and attach their body text as ``content``."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        concurrency: int = 5,
        fetcher: Optional[HtmlFetcher] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.concurrency = max(1, concurrency)
        self._fetcher = fetcher

    async def _fetch_html(self, url: str) -> str:
        if self._fetcher is not None:
            return await self._fetcher(url)
        headers = {**DEFAULT_HEADERS, "Accept": "text/html,application/xhtml+xml"}
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
            return resp.text

    async def fetch_body(self, url: str) -> Optional[str]:
        """Return the extracted body for ``url`` or ``None``; never raises."""
        try:
            html = await self._fetch_html(url)
            return extract_body(html)
        except Exception as exc:  # malformed pages and network failures alike degrade to None
            logger.warning("enrich.failed", extra={"url": url, "error": str(exc)})
            return None

    async def enrich(self, articles: Sequence[Article]) -> List[Article]:
        """Attach bodies concurrently; a failed task leaves its article unchanged."""
        sem = asyncio.Semaphore(self.concurrency)

        async def _one(article: Article) -> Article:
            async with sem:
                body = await self.fetch_body(article.url)
            if not body:
                return article
            return article.model_copy(update={"content": body})

        results = await asyncio.gather(*(_one(a) for a in articles), return_exceptions=True)
        enriched: List[Article] = []
        for original, result in zip(articles, results):
            if isinstance(result, BaseException):
                logger.warning("enrich.task_failed", extra={"url": original.url, "error": str(result)})
                enriched.append(original)
            else:
                enriched.append(result)
        logger.info(
            "enrich.done",
            extra={"articles": len(enriched), "with_content": sum(1 for a in enriched if a.content)},
        )
        return enriched

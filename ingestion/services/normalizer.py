"""Provider record → canonical Article normalization.

Each upstream provider gets a ``RecordAdapter`` listing the field aliases it
uses; all adapters converge on the same ``normalize`` routine. A record that
lacks a usable title or absolute URL is reported as unusable (``None``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlparse

from ingestion.models.domain import ENGLISH, KOREAN, UNKNOWN_SOURCE, Article, ArticleSource
from ingestion.utils.logging import get_logger

logger = get_logger(__name__)

_HANGUL_RE = re.compile(r"[가-힣]")
_COMPACT_UTC_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})Z$")
_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

KOREAN_MARKERS = frozenset({"Korean", "kor", "ko"})
ENGLISH_MARKERS = frozenset({"English", "eng", "en"})
KOREAN_HOST_SUFFIXES = (".kr",)
GENERIC_HOST_SUFFIXES = (".com", ".org", ".net")


def normalize_date(raw: Any) -> str:
    """Rewrite a provider date to ``YYYY-MM-DDTHH:MM:SSZ``; unknown → ``""``."""
    if raw is None or raw == "":
        return ""
    if not isinstance(raw, str):
        logger.warning("normalize.unexpected_date", extra={"raw_date": repr(raw)[:64]})
        return ""
    value = raw.strip()
    match = _COMPACT_UTC_RE.match(value)
    if match:
        y, mo, d, h, mi, s = match.groups()
        return f"{y}-{mo}-{d}T{h}:{mi}:{s}Z"
    if _ISO_PREFIX_RE.match(value):
        return value
    logger.warning("normalize.unexpected_date", extra={"raw_date": value[:64]})
    return ""


def contains_hangul(text: Optional[str]) -> bool:
    return bool(text) and bool(_HANGUL_RE.search(text))


def url_host(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_absolute_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def looks_korean(title: str, description: str, raw_language: Optional[str], url: str) -> bool:
    return (
        contains_hangul(title)
        or contains_hangul(description)
        or raw_language in KOREAN_MARKERS
        or url_host(url).endswith(KOREAN_HOST_SUFFIXES)
    )


def looks_english(raw_language: Optional[str], url: str) -> bool:
    return raw_language in ENGLISH_MARKERS or url_host(url).endswith(GENERIC_HOST_SUFFIXES)


def classify_language(title: str, description: str, raw_language: Optional[str], url: str) -> str:
    if looks_korean(title, description, raw_language, url):
        return KOREAN
    if looks_english(raw_language, url):
        return ENGLISH
    return raw_language or ENGLISH


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _first_text(record: Mapping[str, Any], paths: Sequence[str]) -> str:
    for path in paths:
        value = _lookup(record, path)
        if isinstance(value, str) and value.strip():
            return value
    return ""


@dataclass(frozen=True)
class RecordAdapter:
    """Field aliases of one upstream provider, in priority order."""

    name: str
    title: Sequence[str] = ("title", "seo_title")
    url: Sequence[str] = ("url", "link")
    description: Sequence[str] = ("content", "summary", "description", "seo_description", "snippet")
    published_at: Sequence[str] = ("date_published", "seendate", "publishedAt", "published_at")
    image: Sequence[str] = ("socialimage", "image", "urlToImage")
    source_name: Sequence[str] = ("domain", "source.name")
    source_country: Sequence[str] = ("sourcecountry", "source.country")
    language: Sequence[str] = ("language",)

    def normalize(self, record: Any) -> Optional[Article]:
        """Return the canonical Article for ``record`` or ``None`` if unusable."""
        if not isinstance(record, Mapping):
            return None
        title = _first_text(record, self.title)
        url = _first_text(record, self.url)
        if not title or not url or not is_absolute_url(url):
            logger.debug(
                "normalize.rejected",
                extra={"adapter": self.name, "has_title": bool(title), "has_url": bool(url)},
            )
            return None

        description = _first_text(record, self.description) or title
        raw_language = _first_text(record, self.language) or None
        return Article(
            title=title,
            description=description,
            url=url,
            url_to_image=_first_text(record, self.image) or None,
            published_at=normalize_date(_first_text(record, self.published_at) or None),
            source=ArticleSource(
                name=_first_text(record, self.source_name) or UNKNOWN_SOURCE,
                country=_first_text(record, self.source_country) or None,
            ),
            language=classify_language(title, description, raw_language, url),
        )


GENERIC_ADAPTER = RecordAdapter(name="generic")

GDELT_ADAPTER = RecordAdapter(
    name="gdelt",
    published_at=("date_published", "seendate", "seo_date_published"),
)

NEWS_API_ADAPTER = RecordAdapter(
    name="news_api",
    title=("title",),
    url=("url",),
    description=("content", "description"),
    published_at=("publishedAt",),
    image=("urlToImage",),
    source_name=("source.name",),
    source_country=("source.country",),
)


def normalize_record(record: Any, adapter: RecordAdapter = GENERIC_ADAPTER) -> Optional[Article]:
    return adapter.normalize(record)

"""Connector abstraction, errors, and the rate-limited retrying fetch loop."""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from ingestion.services.extractor import extract_records
from ingestion.services.normalizer import RecordAdapter
from ingestion.settings import SearchQuery, Settings, get_settings
from ingestion.utils.logging import get_logger

logger = get_logger(__name__)

# (query, language) -> raw JSON payload; injected for tests/offline runs
ProviderFn = Callable[[str, str], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[None]]

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/json",
}


class ConnectorError(Exception):
    """Base connector error."""


class TransientError(ConnectorError):
    """Retryable error (e.g., rate limit, network hiccup, timeout)."""


class ParseError(TransientError):
    """Upstream body could not be decoded as JSON (retryable)."""


class PermanentError(ConnectorError):
    """Non-retryable error (e.g., 4xx semantics, missing credentials)."""


def decode_payload(text: str) -> Any:
    """Decode a JSON body; a body that decodes to a JSON string is decoded twice."""
    if not text or not text.strip():
        return None
    try:
        data = json.loads(text)
        if isinstance(data, str):
            data = json.loads(data)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ParseError(f"JSON 파싱 실패: {text[:200]!r}") from exc
    return data


class BaseConnector(ABC):
    """Abstract upstream connector with a fixed delay before every request."""

    source: str
    label: str
    adapter: RecordAdapter

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        provider: Optional[ProviderFn] = None,
        sleep: Optional[SleepFn] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._provider = provider
        self._sleep = sleep or asyncio.sleep

    async def fetch(self, query: SearchQuery) -> List[Any]:
        """Return raw records for one query; ``[]`` once retries are exhausted."""
        max_attempts = int(self.settings.max_retries) + 1
        extra = {"source": self.source, "query": query.query, "language": query.language}
        attempt = 0
        while attempt < max_attempts:
            attempt += 1
            await self._sleep(float(self.settings.request_delay_seconds))
            try:
                payload = await self._fetch_payload(query)
            except PermanentError as exc:
                logger.error("fetch.permanent_error", extra={**extra, "error": str(exc)})
                return []
            except TransientError as exc:
                if attempt >= max_attempts:
                    logger.error(
                        "fetch.exhausted",
                        extra={**extra, "attempts": attempt, "error": str(exc)},
                    )
                    return []
                logger.warning(
                    "fetch.retry",
                    extra={**extra, "attempt": attempt, "max_attempts": max_attempts, "error": str(exc)},
                )
                await self._sleep(float(self.settings.retry_delay_seconds))
                continue
            records = extract_records(payload)
            logger.info("fetch.ok", extra={**extra, "attempt": attempt, "raw_count": len(records)})
            return records
        return []

    async def _fetch_payload(self, query: SearchQuery) -> Any:
        if self._provider is not None:
            return await self._provider(query.query, query.language)
        return await self._request(query)

    async def _request(self, query: SearchQuery) -> Any:
        url, params, headers = self.build_request(query)
        timeout = float(self.settings.request_timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.get(url, params=params, headers=headers)
        except httpx.InvalidURL as exc:
            raise PermanentError(f"{self.source} 잘못된 URL: {url}") from exc
        except httpx.TimeoutException as exc:
            raise TransientError(f"{self.source} 타임아웃") from exc
        except httpx.HTTPError as exc:
            raise TransientError(f"{self.source} 호출 오류: {exc}") from exc

        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransientError(f"{self.source} 일시 오류: {resp.status_code}")
        if resp.status_code >= 400:
            raise PermanentError(f"{self.source} 오류: {resp.status_code}")
        return decode_payload(resp.text)

    @abstractmethod
    def build_request(self, query: SearchQuery) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        """Return (url, query params, headers) for one upstream request."""

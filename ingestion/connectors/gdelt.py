"""GDELT DOC 2.0 article-list connector."""

from __future__ import annotations

from typing import Any, Dict

from ingestion.services.normalizer import GDELT_ADAPTER
from ingestion.settings import SearchQuery

from .base import DEFAULT_HEADERS, BaseConnector


class GDELTConnector(BaseConnector):
    """Connector for the GDELT DOC API (``mode=artlist``, JSON).

    - provider 주입 시: 오프라인 모드
    - provider 미주입 시: 실제 HTTP 호출
    """

    source = "gdelt"
    label = "GDELT"
    adapter = GDELT_ADAPTER

    def build_request(self, query: SearchQuery) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        params: Dict[str, Any] = {
            "query": query.query,
            "mode": "artlist",
            "format": "json",
            "maxrecords": int(self.settings.page_size),
            "lang": query.language,
            "domain": "news",
            "sort": "relevancedesc",
        }
        if query.language == "kor":
            params["country"] = "South Korea"
        return self.settings.gdelt_api_url, params, dict(DEFAULT_HEADERS)

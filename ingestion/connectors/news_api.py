"""News API connector (provider-injected for tests/offline)."""

from __future__ import annotations

from typing import Any, Dict

from ingestion.services.normalizer import NEWS_API_ADAPTER
from ingestion.settings import SearchQuery

from .base import BaseConnector, PermanentError

# GDELT-style language codes → NewsAPI ISO-639-1 codes
LANGUAGE_CODES = {"eng": "en", "kor": "ko"}


class NewsAPIConnector(BaseConnector):
    """Connector for NewsAPI ``/v2/everything``."""

    source = "news_api"
    label = "NewsAPI"
    adapter = NEWS_API_ADAPTER

    def build_request(self, query: SearchQuery) -> tuple[str, Dict[str, Any], Dict[str, str]]:
        if not self.settings.news_api_key:
            raise PermanentError("NEWS_API_KEY가 설정되지 않았습니다.")
        headers = {
            "X-Api-Key": self.settings.news_api_key.get_secret_value(),
            "Accept": "application/json",
        }
        params = {
            "q": query.query,
            "pageSize": min(int(self.settings.page_size), 100),
            "language": LANGUAGE_CODES.get(query.language, query.language),
            "sortBy": "relevancy",
        }
        return self.settings.news_api_endpoint, params, headers

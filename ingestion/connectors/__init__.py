"""Upstream news connectors."""

from __future__ import annotations

from ingestion.settings import Settings

from .base import BaseConnector, ConnectorError, ParseError, PermanentError, TransientError
from .gdelt import GDELTConnector
from .news_api import NewsAPIConnector

CONNECTORS = {
    GDELTConnector.source: GDELTConnector,
    NewsAPIConnector.source: NewsAPIConnector,
}


def build_connector(settings: Settings, **kwargs) -> BaseConnector:
    """Instantiate the connector selected by ``NEWS_PROVIDER``."""
    return CONNECTORS[settings.news_provider](settings, **kwargs)


__all__ = [
    "BaseConnector",
    "ConnectorError",
    "GDELTConnector",
    "NewsAPIConnector",
    "ParseError",
    "PermanentError",
    "TransientError",
    "build_connector",
]

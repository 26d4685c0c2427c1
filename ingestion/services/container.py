"""Explicitly constructed collaborators for one running process."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ingestion.connectors import BaseConnector, build_connector
from ingestion.db.session import create_db_engine, create_session_factory, ensure_schema, session_scope
from ingestion.services.enrichment import ContentEnricher
from ingestion.services.relevance import RelevanceFilter, build_relevance_filter
from ingestion.settings import Settings, get_settings
from llm.client.hf_client import HuggingFaceSummarizer
from llm.settings import SummarizerSettings, get_summarizer_settings


@dataclass
class NewsServices:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    connector: BaseConnector
    relevance_filter: RelevanceFilter
    summarizer: HuggingFaceSummarizer
    enricher: Optional[ContentEnricher] = None

    def session(self) -> AbstractContextManager[Session]:
        return session_scope(self.session_factory)

    def ensure_schema(self) -> None:
        ensure_schema(self.engine)

    def close(self) -> None:
        self.engine.dispose()


def build_services(
    settings: Optional[Settings] = None,
    summarizer_settings: Optional[SummarizerSettings] = None,
    *,
    connector: Optional[BaseConnector] = None,
    summarizer: Optional[HuggingFaceSummarizer] = None,
    enricher: Optional[ContentEnricher] = None,
) -> NewsServices:
    """설정에서 서비스 묶음을 만든다. 인자로 넘긴 구성 요소가 우선한다 (테스트 주입)."""
    config = settings or get_settings()
    if enricher is None and config.enrichment_enabled:
        enricher = ContentEnricher(
            timeout_seconds=float(config.enrichment_timeout_seconds),
            concurrency=int(config.enrichment_concurrency),
        )
    # 컨테이너마다 자체 엔진을 소유한다
    engine = create_db_engine(config.database_url)
    return NewsServices(
        settings=config,
        engine=engine,
        session_factory=create_session_factory(engine),
        connector=connector or build_connector(config),
        relevance_filter=build_relevance_filter(config),
        summarizer=summarizer or HuggingFaceSummarizer(summarizer_settings or get_summarizer_settings()),
        enricher=enricher,
    )

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from analysis.repositories.summaries import save_daily_summary
from api.main import create_app
from ingestion.connectors import GDELTConnector
from ingestion.models.domain import Article, ArticleSource, DailySummary
from ingestion.repositories.articles import StorageError, save_article
from ingestion.services.container import build_services
from ingestion.settings import SearchQuery, Settings
from llm.client.hf_client import HuggingFaceSummarizer
from llm.settings import SummarizerSettings

PAYLOAD = {
    "articles": [
        {"url": "https://a.com/1", "title": "Open badge pilot", "seendate": "20240115T010000Z", "domain": "a.com"},
        {"url": "https://b.org/2", "title": "Blockchain credential", "seendate": "20240116T010000Z", "domain": "b.org"},
    ]
}


async def _no_sleep(_seconds: float) -> None:
    return None


def _client(tmp_path: Path, payload: Dict[str, Any] = PAYLOAD, **overrides: Any) -> TestClient:
    base: Dict[str, Any] = {
        "search_queries": [SearchQuery(query="open badge")],
        "database_url": f"sqlite:///{tmp_path / 'api.db'}",
        "enrichment_enabled": False,
        "log_level": "WARNING",
    }
    base.update(overrides)
    settings = Settings(**base)

    async def provider(_query: str, _language: str):
        return payload

    services = build_services(
        settings,
        connector=GDELTConnector(settings, provider=provider, sleep=_no_sleep),
        summarizer=HuggingFaceSummarizer(SummarizerSettings(huggingface_api_key=None)),
    )
    return TestClient(create_app(services=services))


def _seed(client: TestClient) -> None:
    services = client.app.state.services
    with services.session() as session:
        save_article(
            session,
            Article(
                title="Open badge pilot",
                url="https://a.com/1",
                published_at="2024-01-15T01:00:00Z",
                source=ArticleSource(name="a.com"),
                url_to_image="https://a.com/1.png",
            ),
        )
        save_article(
            session,
            Article(
                title="Policy update",
                url="https://b.org/2",
                description="Government regulation on blockchain credentials",
                published_at="2024-01-16T01:00:00Z",
                source=ArticleSource(name="b.org"),
            ),
        )
        save_daily_summary(
            session, DailySummary(date=dt.date(2024, 1, 16), article_count=2, source_count=2, summary="요약")
        )


def test_healthz(tmp_path: Path):
    assert _client(tmp_path).get("/healthz").json() == {"status": "ok"}


def test_news_runs_cycle_and_returns_camel_case_articles(tmp_path: Path):
    client = _client(tmp_path)

    resp = client.get("/api/news")

    assert resp.status_code == 200
    body = resp.json()
    assert [a["url"] for a in body["articles"]] == ["https://b.org/2", "https://a.com/1"]
    assert body["articles"][0]["publishedAt"] == "2024-01-16T01:00:00Z"
    assert "urlToImage" in body["articles"][0]
    assert body["analysis"]["summary"].startswith("이번 뉴스 모음에서는 2개의")

    stats = client.get("/api/news/stats").json()
    assert stats["total_articles"] == 2


def test_news_empty_result_omits_analysis(tmp_path: Path):
    resp = _client(tmp_path, payload={"articles": []}).get("/api/news")

    assert resp.status_code == 200
    assert resp.json() == {"articles": []}


def test_news_empty_result_error_policy(tmp_path: Path):
    client = _client(tmp_path, payload={"articles": []}, empty_result_policy="error")

    resp = client.get("/api/news")

    assert resp.status_code == 500
    assert set(resp.json()) == {"error", "details"}


def test_error_details_hidden_in_production(tmp_path: Path):
    client = _client(tmp_path, payload={"articles": []}, empty_result_policy="error", app_env="production")

    resp = client.get("/api/news")

    assert resp.status_code == 500
    assert "details" not in resp.json()


def test_history_topic_search_and_stats(tmp_path: Path):
    client = _client(tmp_path)
    _seed(client)

    history = client.get("/api/news/history/2024-01-15").json()
    assert [a["url"] for a in history] == ["https://a.com/1"]
    assert history[0]["urlToImage"] == "https://a.com/1.png"

    assert [a["url"] for a in client.get("/api/news/topic/blockchain").json()] == ["https://b.org/2"]
    assert [a["url"] for a in client.get("/api/news/search/OPEN BADGE").json()] == ["https://a.com/1"]

    stats = client.get("/api/news/stats").json()
    assert stats == {
        "total_articles": 2,
        "total_sources": 2,
        "earliest_article": "2024-01-15T01:00:00Z",
        "latest_article": "2024-01-16T01:00:00Z",
    }


def test_history_rejects_malformed_date(tmp_path: Path):
    assert _client(tmp_path).get("/api/news/history/yesterday").status_code == 422


def test_daily_summary_lookup(tmp_path: Path):
    client = _client(tmp_path)
    _seed(client)

    found = client.get("/api/news/summary/2024-01-16")
    assert found.status_code == 200
    assert found.json()["summary"] == "요약"

    assert client.get("/api/news/summary/2024-01-01").status_code == 404


def test_source_label(tmp_path: Path):
    assert _client(tmp_path).get("/api/source").json() == {"source": "GDELT"}

    settings = Settings(news_provider="news_api", database_url=f"sqlite:///{tmp_path / 'other.db'}")
    services = build_services(settings, summarizer=HuggingFaceSummarizer(SummarizerSettings(huggingface_api_key=None)))
    assert TestClient(create_app(services=services)).get("/api/source").json() == {"source": "NewsAPI"}


def test_storage_error_maps_to_500(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    client = _client(tmp_path)

    def _boom(_session):
        raise StorageError("통계 조회 실패")

    monkeypatch.setattr("api.routes.get_stats", _boom)

    resp = client.get("/api/news/stats")

    assert resp.status_code == 500
    assert resp.json()["error"] == "Storage error"
    assert resp.json()["details"] == "통계 조회 실패"

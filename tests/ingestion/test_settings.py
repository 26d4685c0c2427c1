import json

import pytest

from ingestion.settings import get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


def _set_env(monkeypatch, **overrides):
    defaults = {
        "NEWS_PROVIDER": "gdelt",
        "SEARCH_QUERIES": json.dumps(
            [
                {"query": "open badge", "language": "eng"},
                {"query": "디지털 배지", "language": "KOR"},
            ]
        ),
        "DATABASE_URL": "sqlite:///./var/test.db",
    }
    defaults.update(overrides)
    for key, value in defaults.items():
        monkeypatch.setenv(key, value)


def test_get_settings_reads_environment(monkeypatch):
    _set_env(monkeypatch, NEWS_API_KEY="secret-key", RELEVANCE_KEYWORDS='["nft", " "]')

    settings = get_settings()

    assert settings.news_provider == "gdelt"
    assert [(q.query, q.language) for q in settings.search_queries] == [
        ("open badge", "eng"),
        ("디지털 배지", "kor"),
    ]
    assert settings.news_api_key and settings.news_api_key.get_secret_value() == "secret-key"
    assert settings.relevance_keywords == ["nft"]
    assert settings.page_size == 50
    assert settings.max_retries == 3
    assert settings.empty_result_policy == "empty"
    assert settings.display_timezone == "Asia/Seoul"


def test_defaults_without_search_queries(monkeypatch):
    monkeypatch.delenv("SEARCH_QUERIES", raising=False)

    settings = get_settings()

    assert len(settings.search_queries) == 3
    assert all(q.language == "eng" for q in settings.search_queries)
    assert settings.cors_allow_origins == ["*"]
    assert settings.is_production is False


def test_reset_settings_cache_reloads(monkeypatch):
    _set_env(monkeypatch, NEWS_API_KEY="first-key")
    first = get_settings()
    assert first.news_api_key.get_secret_value() == "first-key"

    monkeypatch.setenv("NEWS_API_KEY", "next-key")
    assert get_settings().news_api_key.get_secret_value() == "first-key"

    reset_settings_cache()
    assert get_settings().news_api_key.get_secret_value() == "next-key"


def test_duplicate_search_query_raises(monkeypatch):
    duplicate = json.dumps(
        [
            {"query": "open badge", "language": "eng"},
            {"query": "open badge ", "language": "ENG"},
        ]
    )
    _set_env(monkeypatch, SEARCH_QUERIES=duplicate)

    with pytest.raises(RuntimeError) as excinfo:
        get_settings()
    assert "중복된 검색어" in str(excinfo.value)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("PAGE_SIZE", "251"),
        ("SEARCH_QUERIES", "not-json"),
        ("NEWS_PROVIDER", "rss"),
        ("EMPTY_RESULT_POLICY", "ignore"),
        ("DISPLAY_TIMEZONE", "Mars/Olympus"),
    ],
)
def test_invalid_values_raise(monkeypatch, key, value):
    _set_env(monkeypatch, **{key: value})

    with pytest.raises(RuntimeError):
        get_settings()

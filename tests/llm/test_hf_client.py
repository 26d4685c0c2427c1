from __future__ import annotations

from typing import Any, Dict, List

import pytest

from llm.client.hf_client import HuggingFaceSummarizer, PermanentLLMError, TransientLLMError
from llm.settings import SummarizerSettings, get_summarizer_settings, reset_summarizer_settings_cache


def _settings(**overrides: Any) -> SummarizerSettings:
    base: Dict[str, Any] = {"huggingface_api_key": "hf-token", "summarizer_retry_max_attempts": 1}
    base.update(overrides)
    return SummarizerSettings(**base)


@pytest.mark.asyncio
async def test_payload_shape_and_summary_text():
    payloads: List[Dict[str, Any]] = []

    async def provider(payload):
        payloads.append(payload)
        return [{"summary_text": "  a summary  "}]

    client = HuggingFaceSummarizer(_settings(summarizer_max_input_chars=5), provider=provider)

    assert await client.summarize("abcdefghij", max_length=150, min_length=30) == "a summary"
    assert payloads == [
        {"inputs": "abcde", "parameters": {"max_length": 150, "min_length": 30, "do_sample": False}}
    ]


@pytest.mark.asyncio
async def test_generated_text_is_accepted():
    async def provider(_payload):
        return [{"generated_text": "generated"}]

    client = HuggingFaceSummarizer(_settings(), provider=provider)

    assert await client.summarize("text", max_length=500, min_length=100) == "generated"


@pytest.mark.asyncio
async def test_missing_credentials_never_calls_provider():
    async def provider(_payload):  # pragma: no cover - must not be called
        raise AssertionError("called")

    client = HuggingFaceSummarizer(_settings(huggingface_api_key="  "), provider=provider)

    assert client.available is False
    assert await client.summarize("text", max_length=150, min_length=30) is None


@pytest.mark.asyncio
async def test_transient_errors_retried_then_none():
    calls = {"n": 0}

    async def provider(_payload):
        calls["n"] += 1
        raise TransientLLMError("503")

    client = HuggingFaceSummarizer(_settings(summarizer_retry_max_attempts=2), provider=provider)

    assert await client.summarize("text", max_length=150, min_length=30) is None
    assert calls["n"] == 3


@pytest.mark.asyncio
async def test_transient_then_success():
    responses: List[Any] = [TransientLLMError("loading"), [{"summary_text": "ok"}]]

    async def provider(_payload):
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    client = HuggingFaceSummarizer(_settings(), provider=provider)

    assert await client.summarize("text", max_length=150, min_length=30) == "ok"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [{"error": "bad"}, [], [{"summary_text": ""}], ["x"]])
async def test_unusable_responses_become_none(response):
    async def provider(_payload):
        return response

    client = HuggingFaceSummarizer(_settings(), provider=provider)

    assert await client.summarize("text", max_length=150, min_length=30) is None


@pytest.mark.asyncio
async def test_permanent_error_not_retried():
    calls = {"n": 0}

    async def provider(_payload):
        calls["n"] += 1
        raise PermanentLLMError("401")

    client = HuggingFaceSummarizer(_settings(summarizer_retry_max_attempts=3), provider=provider)

    assert await client.summarize("text", max_length=150, min_length=30) is None
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_http_path_posts_with_bearer_token(httpx_mock):
    url = "https://api-inference.huggingface.co/models/test-model"
    httpx_mock.add_response(method="POST", url=url, json=[{"summary_text": "remote"}])

    client = HuggingFaceSummarizer(_settings(summarizer_model_url=url))

    assert await client.summarize("text", max_length=150, min_length=30) == "remote"
    request = httpx_mock.get_requests()[0]
    assert request.headers["Authorization"] == "Bearer hf-token"


@pytest.mark.asyncio
async def test_http_client_error_returns_none(httpx_mock):
    url = "https://api-inference.huggingface.co/models/test-model"
    httpx_mock.add_response(method="POST", url=url, status_code=400, json={"error": "bad input"})

    client = HuggingFaceSummarizer(_settings(summarizer_model_url=url))

    assert await client.summarize("text", max_length=150, min_length=30) is None


def test_settings_cache_and_env(monkeypatch):
    reset_summarizer_settings_cache()
    monkeypatch.setenv("HUGGINGFACE_API_KEY", "env-token")
    monkeypatch.setenv("SUMMARIZER_CONCURRENCY", "3")
    try:
        settings = get_summarizer_settings()
        assert settings.has_credentials is True
        assert settings.summarizer_concurrency == 3
        assert settings.summarizer_max_input_chars == 4000
    finally:
        reset_summarizer_settings_cache()


@pytest.mark.asyncio
async def test_malformed_model_url_returns_none():
    client = HuggingFaceSummarizer(_settings(summarizer_model_url="https://api-inference\nhuggingface.co/m"))

    assert await client.summarize("text", max_length=150, min_length=30) is None

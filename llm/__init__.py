"""LLM module - remote summarization client and settings."""

from llm.client.hf_client import (
    HuggingFaceSummarizer,
    LLMError,
    PermanentLLMError,
    ProviderFn,
    TransientLLMError,
)
from llm.settings import SummarizerSettings, get_summarizer_settings, reset_summarizer_settings_cache

__all__ = [
    "HuggingFaceSummarizer",
    "LLMError",
    "PermanentLLMError",
    "ProviderFn",
    "TransientLLMError",
    "SummarizerSettings",
    "get_summarizer_settings",
    "reset_summarizer_settings_cache",
]

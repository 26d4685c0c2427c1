"""LLM client module."""

from llm.client.hf_client import (
    HuggingFaceSummarizer,
    LLMError,
    PermanentLLMError,
    ProviderFn,
    TransientLLMError,
)

__all__ = [
    "HuggingFaceSummarizer",
    "LLMError",
    "PermanentLLMError",
    "ProviderFn",
    "TransientLLMError",
]

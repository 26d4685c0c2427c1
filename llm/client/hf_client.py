"""HuggingFace inference 요약 클라이언트.

특징
- 자격 증명이 없으면 호출하지 않고 ``None`` 반환 (호출 측이 로컬 요약으로 대체)
- 재시도/타임아웃 적용, 모든 실패는 ``None``으로 수렴
- Provider 주입으로 테스트 시 네트워크 제거
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from ingestion.utils.logging import get_logger
from llm.settings import SummarizerSettings

logger = get_logger(__name__)


class LLMError(Exception):
    """LLM 호출 관련 기본 오류."""


class TransientLLMError(LLMError):
    """일시 오류(재시도 대상)."""


class PermanentLLMError(LLMError):
    """영구 오류(재시도 불가)."""


# payload -> decoded JSON response
ProviderFn = Callable[[Dict[str, Any]], Awaitable[Any]]


def _extract_summary(data: Any) -> Optional[str]:
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        raise PermanentLLMError(f"예상하지 못한 응답 형식: {type(data).__name__}")
    text = data[0].get("summary_text") or data[0].get("generated_text")
    if not isinstance(text, str) or not text.strip():
        return None
    return text.strip()


@dataclass(frozen=True)
class HuggingFaceSummarizer:
    settings: SummarizerSettings
    provider: Optional[ProviderFn] = None

    @property
    def available(self) -> bool:
        return self.settings.has_credentials

    @property
    def concurrency(self) -> int:
        return int(self.settings.summarizer_concurrency)

    def _build_payload(self, text: str, max_length: int, min_length: int) -> Dict[str, Any]:
        return {
            "inputs": text[: int(self.settings.summarizer_max_input_chars)],
            "parameters": {
                "max_length": int(max_length),
                "min_length": int(min_length),
                "do_sample": False,
            },
        }

    async def _post(self, payload: Dict[str, Any]) -> Any:
        if self.provider is not None:
            return await self.provider(payload)

        assert self.settings.huggingface_api_key is not None
        headers = {
            "Authorization": f"Bearer {self.settings.huggingface_api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        timeout = float(self.settings.summarizer_timeout_seconds)
        url = self.settings.summarizer_model_url
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.InvalidURL as exc:
            raise PermanentLLMError(f"잘못된 요약 모델 URL: {url}") from exc
        except httpx.TimeoutException as exc:
            raise TransientLLMError("요약 요청 타임아웃") from exc
        except httpx.HTTPError as exc:
            raise TransientLLMError(f"요약 요청 오류: {exc}") from exc

        # 503: 모델 로딩 중
        if resp.status_code == 429 or resp.status_code >= 500:
            raise TransientLLMError(f"요약 일시 오류: {resp.status_code}")
        if resp.status_code >= 400:
            raise PermanentLLMError(f"요약 요청 거부: {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise PermanentLLMError("요약 응답 JSON 파싱 실패") from exc

    async def summarize(self, text: str, *, max_length: int, min_length: int) -> Optional[str]:
        """Summarize ``text``; ``None`` when unavailable or the call fails."""
        if not self.available or not text or not text.strip():
            return None

        payload = self._build_payload(text, max_length, min_length)
        max_attempts = int(self.settings.summarizer_retry_max_attempts) + 1
        attempts = 0
        while attempts < max_attempts:
            attempts += 1
            try:
                return _extract_summary(await self._post(payload))
            except TransientLLMError as exc:
                logger.warning(
                    "summarize.retry",
                    extra={"attempt": attempts, "max_attempts": max_attempts, "error": str(exc)},
                )
                continue
            except PermanentLLMError as exc:
                logger.warning("summarize.failed", extra={"error": str(exc)})
                return None
        logger.warning("summarize.exhausted", extra={"attempts": attempts})
        return None

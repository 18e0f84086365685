"""
StudyBot — LLM Abstraction Layer
Async chat completions for explanations and support messages.

Errors propagate. Callers own the fallback text.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import AsyncOpenAI

from studybot.config import (
    LLM_MAX_TOKENS, LLM_MODEL, LLM_TEMPERATURE, LLM_TIMEOUT_SECONDS, OPENAI_API_KEY,
)

logger = logging.getLogger(__name__)


class LLMUnavailable(RuntimeError):
    """No API key configured."""


@dataclass
class LLMResult:
    text: str
    latency_ms: int
    model: str
    usage: dict


class LLMProvider(Protocol):
    async def generate(self, messages: list[dict], **kwargs) -> LLMResult: ...


# ─── OpenAI ──────────────────────────────────────────────────────────────────

class OpenAIChat:
    def __init__(self, api_key: str = OPENAI_API_KEY, model: str = LLM_MODEL):
        self._api_key = api_key
        self._model = model
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise LLMUnavailable("OPENAI_API_KEY is not set")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=LLM_TIMEOUT_SECONDS)
        return self._client

    async def generate(
        self,
        messages: list[dict],
        max_tokens: int = LLM_MAX_TOKENS,
        temperature: float = LLM_TEMPERATURE,
    ) -> LLMResult:
        client = self._get_client()
        start = time.perf_counter()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            elapsed = int((time.perf_counter() - start) * 1000)
            logger.error(f"LLM error after {elapsed}ms: {e}")
            raise

        elapsed = int((time.perf_counter() - start) * 1000)
        content = response.choices[0].message.content
        text = (content or "").strip()
        if not text:
            raise ValueError("LLM returned an empty completion")
        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        logger.info(f"LLM response: {elapsed}ms, {usage.get('total_tokens', '?')} tokens")
        return LLMResult(text=text, latency_ms=elapsed, model=self._model, usage=usage)


_instance: Optional[OpenAIChat] = None


def get_llm() -> OpenAIChat:
    """Get the configured LLM provider (singleton)."""
    global _instance
    if _instance is None:
        _instance = OpenAIChat()
    return _instance

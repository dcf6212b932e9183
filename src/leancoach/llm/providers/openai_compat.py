"""
OpenAI-Compatible LLM Provider

Chat completions against an OpenAI-compatible API, authenticated with an
organization's own API key.
"""
import logging
import httpx
from typing import List, Optional

from .base import BaseLLMProvider, LLMMessage, LLMResponse
from ...config import Config

logger = logging.getLogger("leancoach.llm.openai")


class OpenAICompatProvider(BaseLLMProvider):
    """Provider for /chat/completions style APIs"""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = (base_url or Config.OPENAI_BASE_URL).rstrip("/")
        self.default_model = default_model or Config.OPENAI_MODEL
        self.timeout = timeout or Config.LLM_TIMEOUT
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=15.0),
            headers={"Authorization": f"Bearer {api_key}"},
        )

    async def generate(
        self,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ) -> LLMResponse:
        model_name = model or self.default_model
        payload = {
            "model": model_name,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            response = await self.client.post(f"{self.base_url}/chat/completions", json=payload)
        except httpx.TimeoutException:
            logger.error(f"OpenAI request timed out after {self.timeout}s")
            return LLMResponse(content="", model=model_name, finish_reason="timeout")
        except httpx.HTTPError as e:
            logger.error(f"OpenAI request error: {e}")
            return LLMResponse(content="", model=model_name, finish_reason="error")

        if response.status_code != 200:
            # Never log the request headers, they carry the key
            logger.error(f"OpenAI request failed: {response.status_code}")
            return LLMResponse(content="", model=model_name, finish_reason="error")

        try:
            data = response.json()
        except ValueError:
            logger.error("OpenAI response is not valid JSON")
            return LLMResponse(content="", model=model_name, finish_reason="error")
        if not isinstance(data, dict):
            logger.error("OpenAI response has unexpected shape")
            return LLMResponse(content="", model=model_name, finish_reason="error")

        choice = (data.get("choices") or [{}])[0] or {}
        return LLMResponse(
            content=(choice.get("message") or {}).get("content") or "",
            model=data.get("model") or model_name,
            tokens_used=(data.get("usage") or {}).get("total_tokens") or 0,
            finish_reason=choice.get("finish_reason") or "stop"
        )

    async def close(self):
        await self.client.aclose()

"""
Coach Agent

LangChain chat model wrapper that answers as the Lean A3 coach.
Used when the organization has not configured its own API key.
"""
import logging
from typing import List, Optional

import httpx
from langchain_core.messages import SystemMessage, HumanMessage, AIMessage, BaseMessage
from langchain_ollama import ChatOllama

from .result import AgentResult

logger = logging.getLogger("leancoach.agents.coach")


def to_langchain_messages(system_prompt: str, messages: List[dict]) -> List[BaseMessage]:
    """Convert {"role", "content"} dicts to LangChain message objects"""
    lc_messages: List[BaseMessage] = []
    if system_prompt:
        lc_messages.append(SystemMessage(content=system_prompt))

    for msg in messages:
        role = msg.get("role", "user")
        content = msg.get("content", "")
        if role == "user":
            lc_messages.append(HumanMessage(content=content))
        elif role == "assistant":
            lc_messages.append(AIMessage(content=content))
        elif role == "system":
            lc_messages.append(SystemMessage(content=content))

    return lc_messages


class CoachAgent:
    """Runs coach conversations on an Ollama-served model"""

    def __init__(self, base_url: str, default_model: str, timeout: Optional[float] = None):
        self.base_url = base_url
        self.default_model = default_model
        self.timeout = timeout

    def _create_llm(self, model: str, temperature: float, max_tokens: int) -> ChatOllama:
        client_kwargs = {"timeout": self.timeout} if self.timeout else {}
        return ChatOllama(
            base_url=self.base_url,
            model=model,
            temperature=temperature,
            num_predict=max_tokens,
            client_kwargs=client_kwargs,
        )

    async def run(
        self,
        system_prompt: str,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.4,
        max_tokens: int = 1024,
    ) -> AgentResult:
        """
        Run a single coach turn.

        Args:
            system_prompt: Coach instructions plus A3 context
            messages: Conversation as [{"role": "user"/"assistant", "content": "..."}]
            model: Model override
            temperature: Sampling temperature
            max_tokens: Max tokens in response

        Returns:
            AgentResult; finish_reason is "error" when the call failed
        """
        model = model or self.default_model
        llm = self._create_llm(model, temperature, max_tokens)
        lc_messages = to_langchain_messages(system_prompt, messages)

        logger.info(f"Running coach agent: model={model}, messages={len(lc_messages)}")

        try:
            response = await llm.ainvoke(lc_messages)
        except Exception as e:
            # ChatOllama surfaces transport and model errors from several libraries
            logger.error(f"Coach agent failed: {e}")
            return AgentResult(content="", model=model, finish_reason="error", error=str(e))

        content = response.content if hasattr(response, "content") else str(response)
        usage = getattr(response, "usage_metadata", None) or {}
        return AgentResult(
            content=content if isinstance(content, str) else str(content),
            model=model,
            tokens_used=usage.get("total_tokens", 0),
            finish_reason="stop",
        )

    async def health_check(self) -> bool:
        """Check if the Ollama server answers"""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self.base_url.rstrip('/')}/api/tags")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

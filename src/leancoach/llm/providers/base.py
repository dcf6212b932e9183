"""
Base LLM Provider

Abstract base class for LLM providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class LLMMessage:
    """Message for LLM conversation"""
    role: str  # "system", "user", "assistant"
    content: str


@dataclass
class LLMResponse:
    """Response from LLM"""
    content: str
    model: str
    tokens_used: int = 0
    finish_reason: str = "stop"  # stop, length, error, timeout

    @property
    def failed(self) -> bool:
        return self.finish_reason in ("error", "timeout")


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Implementations:
    - OpenAICompatProvider: OpenAI-compatible API with an organization's own key

    Providers never raise on upstream failures; they return an LLMResponse
    whose finish_reason is "error" or "timeout".
    """

    @abstractmethod
    async def generate(
        self,
        messages: List[LLMMessage],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            messages: Conversation history
            model: Model name (uses default if not specified)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response

        Returns:
            LLMResponse with generated text
        """
        pass

    async def close(self):
        """Release network resources"""
        pass

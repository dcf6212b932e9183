"""LLM Providers"""
from .base import BaseLLMProvider, LLMMessage, LLMResponse
from .openai_compat import OpenAICompatProvider

__all__ = ['BaseLLMProvider', 'LLMMessage', 'LLMResponse', 'OpenAICompatProvider']

"""Lean Coach LLM Integration"""
from .providers.base import BaseLLMProvider, LLMMessage, LLMResponse
from .providers.openai_compat import OpenAICompatProvider

__all__ = ['BaseLLMProvider', 'LLMMessage', 'LLMResponse', 'OpenAICompatProvider']

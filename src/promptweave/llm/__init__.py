"""LLM provider abstraction layer."""

from promptweave.llm.base import LLMProvider, LLMResponse, Message
from promptweave.llm.factory import create_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Message",
    "create_provider",
]

"""Shared test fixtures for promptweave."""

from __future__ import annotations

import time

import pytest

from promptweave.context.models import ContextCollection, ContextItem
from promptweave.context.sources.base import ContextSource
from promptweave.llm.base import LLMProvider, LLMResponse, Message
from promptweave.tokenizer import ApproximateTokenizer


class FakeSource(ContextSource):
    """In-memory source that records how the pipeline drives it."""

    def __init__(
        self,
        name: str,
        items: list[ContextItem] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.items = items or []
        self.error = error
        self.delay = delay
        self.initialize_calls = 0
        self.cleanup_calls = 0
        self.search_calls: list[tuple[str, int]] = []

    @property
    def name(self) -> str:
        return self._name

    def initialize(self) -> None:
        self.initialize_calls += 1

    def search(self, query: str, limit: int = 5) -> ContextCollection:
        self.search_calls.append((query, limit))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ContextCollection(self.items[:limit])

    def cleanup(self) -> None:
        self.cleanup_calls += 1


class FakeLLM(LLMProvider):
    """LLM double that echoes the last message back."""

    def __init__(self, model: str = "gpt-4o") -> None:
        super().__init__(model)
        self.calls: list[tuple[list[Message], dict]] = []

    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        self.calls.append((messages, {"temperature": temperature, "max_tokens": max_tokens}))
        return LLMResponse(content=f"echo: {messages[-1].content}", finish_reason="stop")


def make_items(source: str, count: int, start_score: float = 0.9) -> list[ContextItem]:
    """`count` distinct items with descending scores."""
    return [
        ContextItem(content=f"{source} result {i}", score=round(start_score - i * 0.05, 2), source=source)
        for i in range(count)
    ]


@pytest.fixture
def tokenizer() -> ApproximateTokenizer:
    """Deterministic offline tokenizer: one token per 4 characters."""
    return ApproximateTokenizer()


@pytest.fixture
def faq_docs() -> list[str]:
    return [
        "To reset your password, open account settings and choose 'Reset password'.",
        "Refunds are issued within 5 business days of receiving the returned item.",
        "Shipping is free for orders over $50 within the continental US.",
        "Two-factor authentication can be enabled from the security tab.",
    ]

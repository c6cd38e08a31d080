"""Chat model interface used by ``PromptComposer.run``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class Message(BaseModel):
    """A chat turn sent to the model."""

    role: str  # "system", "user", "assistant"
    content: str = ""


class LLMResponse(BaseModel):
    """A completed model reply."""

    content: str = ""
    finish_reason: str = ""
    usage: dict[str, int] = Field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return sum(self.usage.values())


class LLMProvider(ABC):
    """Async chat completion backend.

    ``model`` doubles as the default model for prompt fitting when a composer
    has no model pinned. SDK clients are created lazily on first request, so
    a provider can be constructed without its SDK installed.
    """

    def __init__(self, model: str, api_key: str | None = None, base_url: str | None = None) -> None:
        self.model = model
        self.api_key = api_key
        self.base_url = base_url

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        return kwargs

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        ...

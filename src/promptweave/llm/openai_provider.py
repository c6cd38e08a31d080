"""OpenAI chat completions, also used for OpenAI-compatible local servers."""

from __future__ import annotations

from typing import Any

from promptweave.exceptions import ProviderNotAvailableError
from promptweave.llm.base import LLMProvider, LLMResponse, Message


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI and OpenAI-compatible APIs (Ollama, vLLM, etc.)."""

    def __init__(
        self, model: str = "gpt-4o", api_key: str | None = None, base_url: str | None = None
    ) -> None:
        super().__init__(model, api_key, base_url)
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError as e:
                raise ProviderNotAvailableError("openai", "openai") from e
            self._client = AsyncOpenAI(**self._client_kwargs())
        return self._client

    def _request_kwargs(
        self, messages: list[Message], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        # Roles map one to one, system turns included
        return {
            "model": self.model,
            "messages": [m.model_dump() for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        response = await self._get_client().chat.completions.create(
            **self._request_kwargs(messages, temperature, max_tokens)
        )

        choice = response.choices[0]
        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            }
        return LLMResponse(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "",
            usage=usage,
        )

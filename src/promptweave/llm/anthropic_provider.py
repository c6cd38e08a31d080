"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import Any

from promptweave.exceptions import ProviderNotAvailableError
from promptweave.llm.base import LLMProvider, LLMResponse, Message


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic's Claude models.

    The Messages API takes the system prompt as a separate field, so every
    system turn in a composed prompt is lifted out and joined.
    """

    def __init__(
        self,
        model: str = "claude-3-5-sonnet-20241022",
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(model, api_key, base_url)
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError as e:
                raise ProviderNotAvailableError("anthropic", "anthropic") from e
            self._client = AsyncAnthropic(**self._client_kwargs())
        return self._client

    def _format_messages(self, messages: list[Message]) -> tuple[str, list[dict]]:
        """Returns (system_prompt, conversation_turns)."""
        system = [m.content for m in messages if m.role == "system"]
        turns = [m.model_dump() for m in messages if m.role != "system"]
        return "\n\n".join(system), turns

    def _request_kwargs(
        self, messages: list[Message], temperature: float, max_tokens: int
    ) -> dict[str, Any]:
        system, turns = self._format_messages(messages)
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": turns,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system
        return kwargs

    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        response = await self._get_client().messages.create(
            **self._request_kwargs(messages, temperature, max_tokens)
        )
        return LLMResponse(
            content="".join(b.text for b in response.content if b.type == "text"),
            finish_reason=response.stop_reason or "",
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
            },
        )

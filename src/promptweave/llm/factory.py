"""Build an LLM provider from ``LLMConfig``."""

from __future__ import annotations

import importlib

from promptweave.config import LLMConfig
from promptweave.exceptions import ConfigError
from promptweave.llm.base import LLMProvider

# provider name -> (module, class); "local" speaks the OpenAI protocol
_PROVIDERS: dict[str, tuple[str, str]] = {
    "openai": ("promptweave.llm.openai_provider", "OpenAIProvider"),
    "local": ("promptweave.llm.openai_provider", "OpenAIProvider"),
    "anthropic": ("promptweave.llm.anthropic_provider", "AnthropicProvider"),
}


def create_provider(config: LLMConfig) -> LLMProvider:
    """Create an LLM provider from configuration.

    Raises:
        ConfigError: If the provider is unknown.
        ProviderNotAvailableError: If the provider's SDK is not installed
            (raised on first request).
    """
    provider = config.provider.lower()
    if provider not in _PROVIDERS:
        raise ConfigError(
            f"Unknown LLM provider: '{provider}'. "
            f"Supported providers: {', '.join(_PROVIDERS)}"
        )

    module_name, class_name = _PROVIDERS[provider]
    provider_cls = getattr(importlib.import_module(module_name), class_name)
    return provider_cls(model=config.model, api_key=config.api_key, base_url=config.base_url)

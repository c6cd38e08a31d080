"""Static model lookup tables: context window sizes and BPE encodings.

Lookups match model-name substrings in table order, so more specific
patterns (``gpt-4-turbo``) must come before their prefixes (``gpt-4``).
"""

from __future__ import annotations

DEFAULT_CONTEXT_WINDOW = 4_096
DEFAULT_ENCODING = "cl100k_base"

_CONTEXT_WINDOWS: tuple[tuple[str, int], ...] = (
    # OpenAI GPT-5
    ("gpt-5-mini", 400_000),
    ("gpt-5-nano", 400_000),
    ("gpt-5", 400_000),
    # OpenAI GPT-4.1
    ("gpt-4.1-mini", 1_000_000),
    ("gpt-4.1-nano", 1_000_000),
    ("gpt-4.1", 1_000_000),
    # OpenAI GPT-4
    ("gpt-4-turbo", 128_000),
    ("gpt-4o", 128_000),
    ("gpt-4-32k", 32_768),
    ("gpt-4", 8_192),
    # OpenAI GPT-3.5
    ("gpt-3.5-turbo-16k", 16_385),
    ("gpt-3.5-turbo", 16_385),
    # OpenAI o1
    ("o1-preview", 128_000),
    ("o1-mini", 128_000),
    # Anthropic
    ("claude-3-5-sonnet", 200_000),
    ("claude-3-opus", 200_000),
    ("claude-3-sonnet", 200_000),
    ("claude-3-haiku", 200_000),
    ("claude-2.1", 200_000),
    ("claude-2.0", 100_000),
    ("claude-instant", 100_000),
    # Mistral
    ("mistral-large", 128_000),
    ("mistral-medium", 32_000),
    ("mistral-small", 32_000),
    ("mistral-tiny", 32_000),
    ("mixtral-8x7b", 32_000),
    ("mixtral-8x22b", 64_000),
    # Google
    ("gemini-1.5-pro", 2_000_000),
    ("gemini-1.5-flash", 1_000_000),
    ("gemini-pro", 32_768),
    # Cohere
    ("command-r-plus", 128_000),
    ("command-r", 128_000),
    ("command", 4_096),
)

_ENCODINGS: tuple[tuple[str, str], ...] = (
    ("gpt-5", "o200k_base"),
    ("gpt-4.1", "o200k_base"),
    ("gpt-4", "cl100k_base"),
    ("gpt-3.5-turbo", "cl100k_base"),
    ("o1-", "o200k_base"),
    ("text-embedding-ada-002", "cl100k_base"),
    ("text-embedding-3", "cl100k_base"),
    # Legacy completions models
    ("text-davinci-003", "p50k_base"),
    ("text-davinci-002", "p50k_base"),
    ("davinci", "r50k_base"),
    ("curie", "r50k_base"),
    ("babbage", "r50k_base"),
    ("ada", "r50k_base"),
)


def context_window_for(model: str) -> int:
    """Context window size for a model, falling back to 4096 tokens."""
    for pattern, window in _CONTEXT_WINDOWS:
        if pattern in model:
            return window
    return DEFAULT_CONTEXT_WINDOW


def encoding_for(model: str) -> str:
    """BPE encoding name for a model, falling back to cl100k_base."""
    for pattern, encoding in _ENCODINGS:
        if pattern in model:
            return encoding
    return DEFAULT_ENCODING


def all_models() -> dict[str, int]:
    """Every known model pattern with its context window, in lookup order."""
    return dict(_CONTEXT_WINDOWS)

"""Model-aware token counting.

Usage:
    from promptweave.tokenizer import TiktokenTokenizer

    tokenizer = TiktokenTokenizer()
    tokenizer.count("Hello world", "gpt-4")
    tokenizer.context_window("gpt-4o")  # 128000
"""

from __future__ import annotations

import threading

from promptweave.config import TokenizerConfig
from promptweave.exceptions import ConfigError
from promptweave.tokenizer.approximate import ApproximateTokenizer
from promptweave.tokenizer.base import Tokenizer
from promptweave.tokenizer.limits import all_models, context_window_for, encoding_for
from promptweave.tokenizer.tiktoken_tokenizer import TiktokenTokenizer

__all__ = [
    "Tokenizer",
    "TiktokenTokenizer",
    "ApproximateTokenizer",
    "create_tokenizer",
    "default_tokenizer",
    "context_window_for",
    "encoding_for",
    "all_models",
]

_default: Tokenizer | None = None
_default_lock = threading.Lock()


def create_tokenizer(config: TokenizerConfig | None = None) -> Tokenizer:
    """Create a tokenizer backend from configuration.

    Raises:
        ConfigError: If the backend name is unknown.
    """
    backend = (config or TokenizerConfig()).backend.lower()
    if backend == "tiktoken":
        return TiktokenTokenizer()
    elif backend == "approximate":
        return ApproximateTokenizer()
    raise ConfigError(
        f"Unknown tokenizer backend: '{backend}'. Supported backends: tiktoken, approximate"
    )


def default_tokenizer() -> Tokenizer:
    """Process-wide shared tokenizer used when none is passed explicitly."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = TiktokenTokenizer()
    return _default

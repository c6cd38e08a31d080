"""Tokenizer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Tokenizer(ABC):
    """Counts, encodes and decodes model-specific tokens.

    Implementations resolve the encoding from the model name, so the same
    instance can serve every model it supports.
    """

    @abstractmethod
    def count(self, text: str, model: str) -> int:
        """Number of tokens `text` occupies for `model`."""
        ...

    @abstractmethod
    def encode(self, text: str, model: str) -> list[int]:
        ...

    @abstractmethod
    def decode(self, tokens: list[int], model: str) -> str:
        ...

    @abstractmethod
    def context_window(self, model: str) -> int:
        """Maximum input tokens the model accepts."""
        ...

    @abstractmethod
    def supports(self, model: str) -> bool:
        """Whether this tokenizer can encode text for `model`.

        Unsupported models are reported here instead of raising, so callers
        can probe before committing to a model.
        """
        ...

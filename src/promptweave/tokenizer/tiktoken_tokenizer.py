"""Exact BPE token counting backed by tiktoken."""

from __future__ import annotations

import logging
import threading

import tiktoken

from promptweave.tokenizer.base import Tokenizer
from promptweave.tokenizer.limits import context_window_for, encoding_for

logger = logging.getLogger("promptweave.tokenizer")


class TiktokenTokenizer(Tokenizer):
    """Tokenizer using OpenAI's tiktoken encodings.

    Encoders are loaded lazily, once per encoding name, and shared by every
    model that resolves to the same encoding. The cache is safe to use from
    multiple threads.
    """

    def __init__(self) -> None:
        self._encoders: dict[str, tiktoken.Encoding] = {}
        self._lock = threading.Lock()

    def count(self, text: str, model: str) -> int:
        if not text:
            return 0
        return len(self._get_encoder(model).encode(text))

    def encode(self, text: str, model: str) -> list[int]:
        return self._get_encoder(model).encode(text)

    def decode(self, tokens: list[int], model: str) -> str:
        return self._get_encoder(model).decode(list(tokens))

    def context_window(self, model: str) -> int:
        return context_window_for(model)

    def supports(self, model: str) -> bool:
        try:
            self._get_encoder(model)
        except (ValueError, KeyError, OSError) as e:
            logger.debug(f"Encoding for model '{model}' unavailable: {e}")
            return False
        return True

    def _get_encoder(self, model: str) -> tiktoken.Encoding:
        name = encoding_for(model)
        encoder = self._encoders.get(name)
        if encoder is not None:
            return encoder
        with self._lock:
            encoder = self._encoders.get(name)
            if encoder is None:
                logger.debug(f"Loading tiktoken encoding '{name}' for model '{model}'")
                encoder = tiktoken.get_encoding(name)
                self._encoders[name] = encoder
        return encoder

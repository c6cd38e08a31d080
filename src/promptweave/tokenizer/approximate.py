"""Offline token approximation (~4 characters per token)."""

from __future__ import annotations

import math

from promptweave.tokenizer.base import Tokenizer
from promptweave.tokenizer.limits import context_window_for

# Bits per packed character; covers every Unicode code point
_CHAR_BITS = 21
_CHAR_MASK = (1 << _CHAR_BITS) - 1


class ApproximateTokenizer(Tokenizer):
    """Heuristic tokenizer that needs no encoding files.

    A "token" is a fixed-width run of characters, packed into one integer id
    (code point + 1 per character, so a short final run stays distinct).
    Ids are computed, not looked up, so encode/decode round-trip exactly,
    ``count(text) == len(encode(text))`` always holds, and no vocabulary
    accumulates over the life of the process.
    """

    CHARS_PER_TOKEN = 4

    def __init__(self, chars_per_token: int = CHARS_PER_TOKEN) -> None:
        if chars_per_token < 1:
            raise ValueError("chars_per_token must be at least 1")
        self.chars_per_token = chars_per_token

    def count(self, text: str, model: str) -> int:
        return math.ceil(len(text) / self.chars_per_token)

    def encode(self, text: str, model: str) -> list[int]:
        width = self.chars_per_token
        return [_pack(text[i : i + width]) for i in range(0, len(text), width)]

    def decode(self, tokens: list[int], model: str) -> str:
        return "".join(_unpack(t) for t in tokens)

    def context_window(self, model: str) -> int:
        return context_window_for(model)

    def supports(self, model: str) -> bool:
        return True


def _pack(chunk: str) -> int:
    token_id = 0
    for position, char in enumerate(chunk):
        token_id |= (ord(char) + 1) << (position * _CHAR_BITS)
    return token_id


def _unpack(token_id: int) -> str:
    chars = []
    while token_id:
        chars.append(chr((token_id & _CHAR_MASK) - 1))
        token_id >>= _CHAR_BITS
    return "".join(chars)

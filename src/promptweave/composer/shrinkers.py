"""Strategies for shrinking section text toward a token target.

Every shrinker honours the same contract:
  - returns "" when ``target_tokens <= 0``
  - returns the input unchanged when it already fits
  - otherwise returns text whose token count is at most ``target_tokens``
    whenever that is achievable by dropping trailing words
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum

from promptweave.tokenizer import Tokenizer

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")

_MARKDOWN_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),  # bold
    (re.compile(r"\*([^*]+)\*"), r"\1"),  # italic
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    (re.compile(r"```[^`]*```"), ""),  # fenced code, dropped entirely
    (re.compile(r"`([^`]+)`"), r"\1"),  # inline code
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),  # headings
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),  # links keep their text
)


class ShrinkerType(str, Enum):
    """Built-in shrinker names."""

    TRUNCATE = "truncate"  # drop trailing sentences, then words
    COMPRESS = "compress"  # strip whitespace and markdown, then truncate

    @property
    def description(self) -> str:
        if self is ShrinkerType.TRUNCATE:
            return "Removes content from the end, respecting sentence boundaries."
        return "Removes formatting and whitespace before falling back to truncation."


class Shrinker(ABC):
    """Reduces text to fit within a token target."""

    def __init__(self, tokenizer: Tokenizer) -> None:
        self.tokenizer = tokenizer

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def shrink(self, content: str, target_tokens: int, model: str) -> str:
        ...

    def _fits(self, content: str, target_tokens: int, model: str) -> bool:
        return self.tokenizer.count(content, model) <= target_tokens

    def _accumulate(self, pieces: list[str], target_tokens: int, model: str) -> str:
        """Join leading pieces with spaces while the whole still fits.

        The accumulated text is re-counted after every candidate piece, since
        token counts are not additive across a join.
        """
        result = ""
        for piece in pieces:
            candidate = piece if result == "" else f"{result} {piece}"
            if not self._fits(candidate, target_tokens, model):
                break
            result = candidate
        return result

    def _truncate_words(self, content: str, target_tokens: int, model: str) -> str:
        return self._accumulate(content.split(" "), target_tokens, model)


class TruncateShrinker(Shrinker):
    """Cut content from the end.

    In sentence-aware mode (the default) whole sentences are kept; if not even
    the first sentence fits, it falls back to whole words.
    """

    def __init__(self, tokenizer: Tokenizer, sentence_aware: bool = True) -> None:
        super().__init__(tokenizer)
        self.sentence_aware = sentence_aware

    @property
    def name(self) -> str:
        return ShrinkerType.TRUNCATE.value

    def shrink(self, content: str, target_tokens: int, model: str) -> str:
        if target_tokens <= 0:
            return ""
        if self._fits(content, target_tokens, model):
            return content
        if self.sentence_aware:
            return self._truncate_sentences(content, target_tokens, model)
        return self._truncate_words(content, target_tokens, model)

    def _truncate_sentences(self, content: str, target_tokens: int, model: str) -> str:
        sentences = [s for s in _SENTENCE_BREAK.split(content) if s]
        if not sentences:
            return ""

        result = self._accumulate(sentences, target_tokens, model)
        if result == "":
            return self._truncate_words(content, target_tokens, model)
        return result


class CompressShrinker(Shrinker):
    """Squeeze out whitespace and markdown before resorting to truncation.

    Each stage is only applied if the previous one left the content too long.
    """

    @property
    def name(self) -> str:
        return ShrinkerType.COMPRESS.value

    def shrink(self, content: str, target_tokens: int, model: str) -> str:
        if target_tokens <= 0:
            return ""
        if self._fits(content, target_tokens, model):
            return content

        compressed = collapse_whitespace(content)
        if self._fits(compressed, target_tokens, model):
            return compressed

        compressed = strip_markdown(compressed)
        if self._fits(compressed, target_tokens, model):
            return compressed

        return self._truncate_words(compressed, target_tokens, model)


def collapse_whitespace(text: str) -> str:
    """Collapse blank-line runs and repeated spaces, turn tabs into spaces, trim."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = text.replace("\t", " ")
    text = re.sub(r" {2,}", " ", text)
    return text.strip()


def strip_markdown(text: str) -> str:
    """Remove emphasis, code fences, inline code, headings and link syntax."""
    for pattern, replacement in _MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text

"""Keyword search over a fixed set of strings (FAQs, doc snippets)."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from promptweave.context.models import ContextCollection, ContextItem
from promptweave.context.sources.base import ContextSource

_STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "was", "are", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "should", "could", "may", "might",
    "can", "this", "that", "these", "those", "i", "you", "he", "she", "it",
    "we", "they", "what", "which", "who", "when", "where", "why", "how",
})


@dataclass
class _Entry:
    content: str
    keywords: list[str]
    metadata: dict[str, Any] = field(default_factory=dict)


class StaticSource(ContextSource):
    """In-memory keyword index over hardcoded content.

    Scores by the share of query keywords an entry contains, with a small
    bonus per match; an exact (case-insensitive) phrase match scores 1.0.
    """

    def __init__(self, name: str = "static") -> None:
        self._name = name
        self._entries: list[_Entry] = []
        self._initialized = False

    @classmethod
    def from_strings(cls, strings: Iterable[str], name: str = "static-strings") -> StaticSource:
        source = cls(name)
        for index, content in enumerate(strings):
            source._entries.append(
                _Entry(content=content, keywords=extract_keywords(content), metadata={"index": index})
            )
        return source

    @classmethod
    def from_items(cls, items: Iterable[dict[str, Any]], name: str = "static-items") -> StaticSource:
        """Build from dicts with ``content`` and optional ``keywords`` / ``metadata``."""
        source = cls(name)
        for index, item in enumerate(items):
            content = item["content"]
            keywords = item.get("keywords")
            source._entries.append(
                _Entry(
                    content=content,
                    keywords=[k.lower() for k in keywords] if keywords else extract_keywords(content),
                    metadata=item.get("metadata") or {"index": index},
                )
            )
        return source

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._entries)

    def initialize(self) -> None:
        self._initialized = True

    def search(self, query: str, limit: int = 5) -> ContextCollection:
        if not self._initialized:
            self.initialize()

        query_keywords = extract_keywords(query)
        scored: list[tuple[float, _Entry]] = []
        for entry in self._entries:
            score = _score(query, query_keywords, entry)
            if score > 0:
                scored.append((score, entry))

        scored.sort(key=lambda pair: pair[0], reverse=True)

        return ContextCollection(
            ContextItem(
                content=entry.content,
                score=score,
                source=self._name,
                metadata=dict(entry.metadata),
            )
            for score, entry in scored[:limit]
        )

    def cleanup(self) -> None:
        self._initialized = False


def extract_keywords(text: str) -> list[str]:
    """Lowercased words longer than two characters, minus stop words, in order."""
    words = re.split(r"[^a-z0-9]+", text.lower())
    seen: dict[str, None] = {}
    for word in words:
        if len(word) > 2 and word not in _STOP_WORDS:
            seen.setdefault(word, None)
    return list(seen)


def _score(query: str, query_keywords: list[str], entry: _Entry) -> float:
    if not query_keywords:
        return 0.0

    if query.lower() in entry.content.lower():
        return 1.0

    entry_keywords = set(entry.keywords)
    matches = sum(1 for k in query_keywords if k in entry_keywords)
    if matches == 0:
        return 0.0

    score = matches / len(query_keywords)
    score *= 1 + matches * 0.1
    return min(1.0, score)

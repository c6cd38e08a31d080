"""Data models for retrieved context: scored items and ranked collections."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, overload

from pydantic import BaseModel, ConfigDict, Field

from promptweave.tokenizer import Tokenizer, default_tokenizer

DEFAULT_MODEL = "gpt-4"

# Only emit a partial item when at least this many tokens are left over
_MIN_PARTIAL_TOKENS = 50


class ContextItem(BaseModel):
    """A single piece of retrieved context.

    Immutable: the ``with_*`` helpers return modified copies. ``metadata`` is
    not frozen in place, so sources hand each item its own dict.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    score: float = 1.0  # conventionally 0.0 (irrelevant) .. 1.0 (highly relevant)
    source: str = "unknown"  # e.g. "static-faqs", "vectorstore"
    metadata: dict[str, Any] = Field(default_factory=dict)

    def with_score(self, score: float) -> ContextItem:
        return self.model_copy(update={"score": score})

    def with_metadata(self, metadata: dict[str, Any]) -> ContextItem:
        """Copy with `metadata` merged over the existing entries."""
        return self.model_copy(update={"metadata": {**self.metadata, **metadata}})

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "score": self.score,
            "source": self.source,
            "metadata": dict(self.metadata),
        }


class ContextCollection(Sequence[ContextItem]):
    """An ordered, immutable sequence of context items.

    Order is rank order, except directly after merging raw source results,
    where it is source fan-out order. Every operation returns a new
    collection.
    """

    def __init__(self, items: Iterable[ContextItem] = ()) -> None:
        self._items: tuple[ContextItem, ...] = tuple(items)

    # -------------------------------------------------------------------
    # Sequence protocol
    # -------------------------------------------------------------------

    @overload
    def __getitem__(self, index: int) -> ContextItem: ...

    @overload
    def __getitem__(self, index: slice) -> ContextCollection: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ContextCollection(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ContextItem]:
        return iter(self._items)

    def __add__(self, other: Iterable[ContextItem]) -> ContextCollection:
        return ContextCollection(self._items + tuple(other))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ContextCollection):
            return self._items == other._items
        return NotImplemented

    # Items carry dict metadata, so collections compare by value but cannot be hashed
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ContextCollection({len(self._items)} items)"

    def all(self) -> list[ContextItem]:
        return list(self._items)

    def take(self, limit: int) -> ContextCollection:
        return ContextCollection(self._items[: max(limit, 0)])

    def first(self, predicate: Callable[[ContextItem], bool] | None = None) -> ContextItem | None:
        for item in self._items:
            if predicate is None or predicate(item):
                return item
        return None

    # -------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------

    def deduplicate(self) -> ContextCollection:
        """Collapse items with identical content, keeping the best-scored one.

        Ties keep the first occurrence. Output is in first-occurrence order of
        each distinct content, not sorted by score.
        """
        kept: dict[str, ContextItem] = {}
        for item in self._items:
            digest = hashlib.sha256(item.content.encode("utf-8")).hexdigest()
            current = kept.get(digest)
            if current is None or item.score > current.score:
                # Reassigning an existing key keeps its original position
                kept[digest] = item
        return ContextCollection(kept.values())

    def rerank(self) -> ContextCollection:
        """Stable sort by score, highest first."""
        return ContextCollection(sorted(self._items, key=lambda i: i.score, reverse=True))

    # -------------------------------------------------------------------
    # Token budgeting
    # -------------------------------------------------------------------

    def truncate_to_tokens(
        self,
        max_tokens: int,
        model: str = DEFAULT_MODEL,
        tokenizer: Tokenizer | None = None,
    ) -> ContextCollection:
        """Keep the longest prefix of items that fits within `max_tokens`.

        The first item that does not fit ends the scan. If more than 50 tokens
        remain at that point, a token-sliced copy of it is appended, flagged
        with ``truncated`` and ``original_length`` metadata.
        """
        tokenizer = tokenizer or default_tokenizer()
        used = 0
        kept: list[ContextItem] = []

        for item in self._items:
            item_tokens = tokenizer.count(item.content, model)
            if used + item_tokens <= max_tokens:
                kept.append(item)
                used += item_tokens
                continue

            remaining = max_tokens - used
            if remaining > _MIN_PARTIAL_TOKENS:
                tokens = tokenizer.encode(item.content, model)[:remaining]
                partial = tokenizer.decode(tokens, model)
                # A cut inside a multi-byte character can re-encode to more tokens
                while tokens and tokenizer.count(partial, model) > remaining:
                    tokens = tokens[:-1]
                    partial = tokenizer.decode(tokens, model)
                kept.append(
                    ContextItem(
                        content=partial,
                        score=item.score,
                        source=item.source,
                        metadata={
                            **item.metadata,
                            "truncated": True,
                            "original_length": len(item.content),
                        },
                    )
                )
            break

        return ContextCollection(kept)

    def get_total_tokens(
        self, model: str = DEFAULT_MODEL, tokenizer: Tokenizer | None = None
    ) -> int:
        tokenizer = tokenizer or default_tokenizer()
        return sum(tokenizer.count(item.content, model) for item in self._items)

    # -------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------

    def format_for_prompt(self, format: str = "numbered") -> str:
        """Render the collection for inclusion in a prompt.

        Formats: "numbered" (default), "markdown", "json". Unknown formats
        render as numbered.
        """
        if format == "markdown":
            return self._format_markdown()
        elif format == "json":
            return self._format_json()
        return self._format_numbered()

    def _format_numbered(self) -> str:
        parts = [
            f"[{i}] (score: {item.score:.2f}, source: {item.source})\n{item.content}"
            for i, item in enumerate(self._items, start=1)
        ]
        return "\n\n".join(parts)

    def _format_markdown(self) -> str:
        parts = [
            f"### Context {i} (score: {item.score:.2f})\n\n{item.content}\n\n"
            f"*Source: {item.source}*"
            for i, item in enumerate(self._items, start=1)
        ]
        return "\n\n---\n\n".join(parts)

    def _format_json(self) -> str:
        return json.dumps(
            [item.to_dict() for item in self._items], indent=4, ensure_ascii=False, default=str
        )

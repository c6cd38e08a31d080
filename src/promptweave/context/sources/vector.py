"""Semantic search adapter over a vector store."""

from __future__ import annotations

from typing import Any, Protocol

from promptweave.context.models import ContextCollection, ContextItem
from promptweave.context.sources.base import ContextSource


class VectorStore(Protocol):
    """Anything that can answer a similarity query.

    Hits are dicts with ``content``, a ``score`` (or ``distance``) and
    optional ``metadata``.
    """

    def search(self, query: str, limit: int) -> list[dict[str, Any]]: ...


class VectorStoreSource(ContextSource):
    """Context source backed by semantic similarity search.

    Best for conceptually related content rather than exact keyword hits.
    """

    def __init__(self, store: VectorStore, name: str = "vectorstore") -> None:
        self._store = store
        self._name = name
        self._initialized = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> VectorStore:
        return self._store

    def initialize(self) -> None:
        self._initialized = True

    def search(self, query: str, limit: int = 5) -> ContextCollection:
        if not self._initialized:
            self.initialize()

        hits = self._store.search(query, limit)
        return ContextCollection(
            ContextItem(
                content=hit.get("content", ""),
                score=float(hit.get("score", hit.get("distance", 0.0))),
                source=self._name,
                metadata=dict(hit.get("metadata") or {}),
            )
            for hit in hits[:limit]
        )

    def cleanup(self) -> None:
        self._initialized = False

"""Context source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from promptweave.context.models import ContextCollection


class ContextSource(ABC):
    """A retrieval backend that returns scored context items for a query.

    ``initialize`` and ``cleanup`` may be called any number of times; sources
    must treat repeated calls as no-ops.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier used for ``ContextItem.source`` and logging."""
        ...

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the source (build indexes, open connections)."""
        ...

    @abstractmethod
    def search(self, query: str, limit: int = 5) -> ContextCollection:
        """Return up to `limit` items, best first."""
        ...

    @abstractmethod
    def cleanup(self) -> None:
        """Release anything ``initialize`` acquired."""
        ...

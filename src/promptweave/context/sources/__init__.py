"""Retrieval backends that feed the context pipeline."""

from promptweave.context.sources.base import ContextSource
from promptweave.context.sources.static import StaticSource, extract_keywords
from promptweave.context.sources.vector import VectorStore, VectorStoreSource

__all__ = ["ContextSource", "StaticSource", "VectorStore", "VectorStoreSource", "extract_keywords"]

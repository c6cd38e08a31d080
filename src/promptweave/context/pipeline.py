"""Multi-source context aggregation.

Fans a query out to every registered source, merges the results, removes
duplicate content, re-ranks by score and cuts to the requested limit.

A failing source aborts the whole search: its exception propagates to the
caller unchanged and no partial results are returned.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from promptweave.config import PipelineConfig
from promptweave.context.models import ContextCollection
from promptweave.context.sources.base import ContextSource

logger = logging.getLogger("promptweave.pipeline")

# Sources are asked for more than `limit` so deduplication still leaves enough
OVERFETCH_FACTOR = 1.5


class ContextPipeline:
    """Aggregate, deduplicate and rank results from several context sources.

    Usage:
        pipeline = ContextPipeline().add_source(faqs).add_source(docs)
        results = pipeline.search("reset my password", limit=5)
        prompt_block = results.format_for_prompt()
    """

    def __init__(
        self,
        sources: Iterable[ContextSource] = (),
        deduplicate: bool = True,
        rerank: bool = True,
        parallel: bool = False,
    ) -> None:
        self._sources: list[ContextSource] = list(sources)
        self.deduplicate = deduplicate
        self.rerank = rerank
        self.parallel = parallel

    @classmethod
    def from_config(
        cls, config: PipelineConfig, sources: Iterable[ContextSource] = ()
    ) -> ContextPipeline:
        return cls(
            sources,
            deduplicate=config.deduplicate,
            rerank=config.rerank,
            parallel=config.parallel,
        )

    def add_source(self, source: ContextSource) -> ContextPipeline:
        self._sources.append(source)
        return self

    def add_sources(self, sources: Iterable[ContextSource]) -> ContextPipeline:
        for source in sources:
            self.add_source(source)
        return self

    def set_deduplicate(self, enabled: bool = True) -> ContextPipeline:
        self.deduplicate = enabled
        return self

    def set_rerank(self, enabled: bool = True) -> ContextPipeline:
        self.rerank = enabled
        return self

    @property
    def sources(self) -> list[ContextSource]:
        return list(self._sources)

    def search(self, query: str, limit: int = 10) -> ContextCollection:
        """Search every source and return at most `limit` merged items."""
        if not self._sources:
            return ContextCollection()

        for source in self._sources:
            source.initialize()

        per_source_limit = math.ceil(limit * OVERFETCH_FACTOR)

        if self.parallel and len(self._sources) > 1:
            with ThreadPoolExecutor(max_workers=len(self._sources)) as pool:
                # map() yields in submission order, so registration order wins ties
                batches = list(
                    pool.map(lambda s: self._search_source(s, query, per_source_limit), self._sources)
                )
        else:
            batches = [self._search_source(s, query, per_source_limit) for s in self._sources]

        merged = ContextCollection()
        for batch in batches:
            merged = merged + batch

        collection = merged
        if self.deduplicate:
            collection = collection.deduplicate()
        if self.rerank:
            collection = collection.rerank()
        collection = collection.take(limit)

        logger.debug(
            f"Pipeline search '{query}': {len(merged)} merged, "
            f"{len(collection)} returned (limit {limit})"
        )
        return collection

    def _search_source(
        self, source: ContextSource, query: str, limit: int
    ) -> ContextCollection:
        results = source.search(query, limit)
        logger.debug(f"Source '{source.name}' returned {len(results)} item(s) (limit {limit})")
        return results

    def cleanup(self) -> None:
        """Clean up every source. Safe to call repeatedly."""
        for source in self._sources:
            source.cleanup()

    def __enter__(self) -> ContextPipeline:
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()

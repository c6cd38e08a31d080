"""Context aggregation: scored items, ranked collections and the source pipeline.

Usage:
    from promptweave.context import ContextPipeline, StaticSource

    faqs = StaticSource.from_strings(["Reset passwords from the account page."])
    results = ContextPipeline().add_source(faqs).search("reset password", limit=5)
    print(results.format_for_prompt("markdown"))
"""

from promptweave.context.models import ContextCollection, ContextItem
from promptweave.context.pipeline import ContextPipeline
from promptweave.context.sources import ContextSource, StaticSource, VectorStoreSource

__all__ = [
    "ContextItem",
    "ContextCollection",
    "ContextPipeline",
    "ContextSource",
    "StaticSource",
    "VectorStoreSource",
]

"""Tests for multi-source context aggregation."""

from __future__ import annotations

import pytest

from conftest import FakeSource, make_items
from promptweave.config import PipelineConfig
from promptweave.context import ContextItem, ContextPipeline, StaticSource


class TestPipelineSearch:
    def test_no_sources_returns_empty(self):
        assert len(ContextPipeline().search("anything")) == 0

    def test_initializes_every_source(self):
        a, b = FakeSource("a", make_items("a", 3)), FakeSource("b", make_items("b", 3))
        ContextPipeline().add_sources([a, b]).search("q")
        assert a.initialize_calls == 1
        assert b.initialize_calls == 1

    def test_overfetches_from_each_source(self):
        a, b = FakeSource("a"), FakeSource("b")
        ContextPipeline([a, b]).search("q", limit=10)
        assert a.search_calls == [("q", 15)]
        assert b.search_calls == [("q", 15)]

    def test_overfetch_rounds_up(self):
        a = FakeSource("a")
        ContextPipeline([a]).search("q", limit=3)
        assert a.search_calls == [("q", 5)]

    def test_result_limited(self):
        a, b = FakeSource("a", make_items("a", 8)), FakeSource("b", make_items("b", 8))
        results = ContextPipeline([a, b]).search("q", limit=10)
        assert len(results) == 10

    def test_results_ranked_by_score(self):
        a = FakeSource("a", [ContextItem(content="low", score=0.2)])
        b = FakeSource("b", [ContextItem(content="high", score=0.9)])
        results = ContextPipeline([a, b]).search("q")
        assert [r.content for r in results] == ["high", "low"]

    def test_deduplicates_across_sources(self):
        a = FakeSource("a", [ContextItem(content="shared", score=0.4, source="a")])
        b = FakeSource("b", [ContextItem(content="shared", score=0.8, source="b")])
        results = ContextPipeline([a, b]).search("q")
        assert len(results) == 1
        assert results[0].source == "b"

    def test_dedup_disabled(self):
        a = FakeSource("a", [ContextItem(content="shared", score=0.4)])
        b = FakeSource("b", [ContextItem(content="shared", score=0.8)])
        results = ContextPipeline([a, b]).set_deduplicate(False).search("q")
        assert len(results) == 2

    def test_rerank_disabled_keeps_fan_out_order(self):
        a = FakeSource("a", [ContextItem(content="low", score=0.2)])
        b = FakeSource("b", [ContextItem(content="high", score=0.9)])
        results = ContextPipeline([a, b]).set_rerank(False).search("q")
        assert [r.content for r in results] == ["low", "high"]

    def test_ties_keep_registration_order(self):
        a = FakeSource("a", [ContextItem(content="from a", score=0.5)])
        b = FakeSource("b", [ContextItem(content="from b", score=0.5)])
        results = ContextPipeline([a, b]).search("q")
        assert [r.content for r in results] == ["from a", "from b"]

    def test_source_failure_propagates(self):
        good = FakeSource("good", make_items("good", 2))
        bad = FakeSource("bad", error=RuntimeError("index offline"))
        with pytest.raises(RuntimeError, match="index offline"):
            ContextPipeline([good, bad]).search("q")

    def test_with_static_sources(self, faq_docs):
        pipeline = ContextPipeline().add_source(StaticSource.from_strings(faq_docs, name="faqs"))
        results = pipeline.search("reset password", limit=2)
        assert results[0].content == faq_docs[0]


class TestParallelSearch:
    def test_parallel_matches_sequential(self):
        def build(parallel):
            return ContextPipeline(
                [FakeSource("a", make_items("a", 5)), FakeSource("b", make_items("b", 5, 0.85))],
                parallel=parallel,
            )

        assert build(True).search("q", 6) == build(False).search("q", 6)

    def test_parallel_ties_keep_registration_order(self):
        # The first source is slower, so it finishes last
        a = FakeSource("a", [ContextItem(content="from a", score=0.5)], delay=0.05)
        b = FakeSource("b", [ContextItem(content="from b", score=0.5)])
        results = ContextPipeline([a, b], parallel=True).search("q")
        assert [r.content for r in results] == ["from a", "from b"]

    def test_parallel_failure_propagates(self):
        bad = FakeSource("bad", error=ValueError("boom"))
        with pytest.raises(ValueError, match="boom"):
            ContextPipeline([FakeSource("ok"), bad], parallel=True).search("q")


class TestPipelineLifecycle:
    def test_cleanup_is_repeatable(self):
        a = FakeSource("a")
        pipeline = ContextPipeline([a])
        pipeline.cleanup()
        pipeline.cleanup()
        assert a.cleanup_calls == 2

    def test_context_manager_cleans_up(self):
        a = FakeSource("a")
        with ContextPipeline([a]) as pipeline:
            pipeline.search("q")
        assert a.cleanup_calls == 1

    def test_sources_is_a_copy(self):
        pipeline = ContextPipeline([FakeSource("a")])
        pipeline.sources.append(FakeSource("b"))
        assert len(pipeline.sources) == 1

    def test_from_config(self):
        config = PipelineConfig(deduplicate=False, rerank=False, parallel=True)
        pipeline = ContextPipeline.from_config(config, [FakeSource("a")])
        assert pipeline.deduplicate is False
        assert pipeline.rerank is False
        assert pipeline.parallel is True
        assert len(pipeline.sources) == 1

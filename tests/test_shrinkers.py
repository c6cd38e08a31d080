"""Tests for section shrinking strategies."""

from __future__ import annotations

import pytest

from promptweave.composer.shrinkers import (
    CompressShrinker,
    ShrinkerType,
    TruncateShrinker,
    collapse_whitespace,
    strip_markdown,
)

MODEL = "gpt-4"


@pytest.fixture(params=["truncate", "words", "compress"])
def shrinker(request, tokenizer):
    if request.param == "truncate":
        return TruncateShrinker(tokenizer)
    elif request.param == "words":
        return TruncateShrinker(tokenizer, sentence_aware=False)
    return CompressShrinker(tokenizer)


class TestShrinkerContract:
    def test_zero_target_is_empty(self, shrinker):
        assert shrinker.shrink("Some content here.", 0, MODEL) == ""

    def test_negative_target_is_empty(self, shrinker):
        assert shrinker.shrink("Some content here.", -5, MODEL) == ""

    def test_fitting_content_unchanged(self, shrinker):
        content = "Already  **short**\tenough."
        assert shrinker.shrink(content, 100, MODEL) == content

    @pytest.mark.parametrize("target", [1, 3, 10, 40, 120])
    def test_result_within_target(self, shrinker, tokenizer, target):
        content = "The quick brown fox jumps over the lazy dog. " * 40
        result = shrinker.shrink(content, target, MODEL)
        assert tokenizer.count(result, MODEL) <= target

    def test_oversized_single_word_drops_everything(self, shrinker):
        assert shrinker.shrink("supercalifragilistic", 2, MODEL) == ""


class TestTruncateShrinker:
    def test_keeps_whole_sentences(self, tokenizer):
        shrinker = TruncateShrinker(tokenizer)
        assert shrinker.shrink("First sentence. Second sentence.", 4, MODEL) == "First sentence."

    def test_long_text_ends_on_sentence(self, tokenizer):
        shrinker = TruncateShrinker(tokenizer)
        result = shrinker.shrink("This is a long sentence. " * 1000, 50, MODEL)
        assert result.endswith(".")
        assert result == " ".join(["This is a long sentence."] * 8)

    def test_falls_back_to_words(self, tokenizer):
        shrinker = TruncateShrinker(tokenizer)
        result = shrinker.shrink("This is a very long sentence without a break", 3, MODEL)
        assert result == "This is a"

    def test_question_and_exclamation_marks(self, tokenizer):
        shrinker = TruncateShrinker(tokenizer)
        assert shrinker.shrink("Why not? Because! And more text.", 2, MODEL) == "Why not?"

    def test_word_mode(self, tokenizer):
        shrinker = TruncateShrinker(tokenizer, sentence_aware=False)
        assert shrinker.shrink("alpha beta gamma delta", 3, MODEL) == "alpha beta"

    def test_name(self, tokenizer):
        assert TruncateShrinker(tokenizer).name == "truncate"


class TestCompressShrinker:
    def test_whitespace_stage(self, tokenizer):
        shrinker = CompressShrinker(tokenizer)
        assert shrinker.shrink("word  word  word  word", 5, MODEL) == "word word word word"

    def test_markdown_stage(self, tokenizer):
        shrinker = CompressShrinker(tokenizer)
        assert shrinker.shrink("**bold** and *it*", 3, MODEL) == "bold and it"

    def test_code_fences_removed(self, tokenizer):
        shrinker = CompressShrinker(tokenizer)
        assert shrinker.shrink("Before ```x = 1``` after", 4, MODEL) == "Before  after"

    def test_truncation_stage(self, tokenizer):
        shrinker = CompressShrinker(tokenizer)
        result = shrinker.shrink("**one**  two   three four five six", 3, MODEL)
        assert result == "one two"

    def test_name(self, tokenizer):
        assert CompressShrinker(tokenizer).name == "compress"


class TestTextHelpers:
    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a\n\n\n\nb\t\tc   d ") == "a\n\nb c d"

    def test_strip_markdown_emphasis_and_code(self):
        assert strip_markdown("Use `echo` and __x__ and _y_") == "Use echo and x and y"

    def test_strip_markdown_headings_and_links(self):
        assert strip_markdown("## Title\nSee [the docs](https://example.com)") == "Title\nSee the docs"


class TestShrinkerType:
    def test_values(self):
        assert ShrinkerType("truncate") is ShrinkerType.TRUNCATE
        assert ShrinkerType.COMPRESS == "compress"

    def test_descriptions(self):
        assert "sentence" in ShrinkerType.TRUNCATE.description
        assert "formatting" in ShrinkerType.COMPRESS.description

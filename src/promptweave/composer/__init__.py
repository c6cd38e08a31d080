"""Token-budgeted prompt composition.

Usage:
    from promptweave.composer import PromptComposer, ShrinkerType

    composer = PromptComposer(tokenizer).model("gpt-4").reserve_output_tokens(500)
    composer.section("system", "You are helpful.", priority=100)
    composer.section("docs", long_text, priority=50, shrinker=ShrinkerType.COMPRESS)
    print(composer.to_text())
"""

from promptweave.composer.composer import PromptComposer
from promptweave.composer.section import ChatTurn, Section
from promptweave.composer.shrinkers import (
    CompressShrinker,
    Shrinker,
    ShrinkerType,
    TruncateShrinker,
)

__all__ = [
    "PromptComposer",
    "Section",
    "ChatTurn",
    "Shrinker",
    "ShrinkerType",
    "TruncateShrinker",
    "CompressShrinker",
]

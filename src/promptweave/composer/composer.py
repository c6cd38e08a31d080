"""Prompt composition under a model's token budget.

Fitting algorithm:
  1. available = context_window(model) - reserved_output_tokens
  2. Sort sections by priority, highest first (stable).
  3. If the total already fits, stop without touching anything.
  4. Sections without a shrinker are kept verbatim. If they alone exceed
     the budget, raise BudgetExceededError.
  5. The remaining budget is split evenly across shrinkable sections, and
     each is shrunk to its share with its named strategy.

The even split ignores priority magnitude: priority decides
output order and which sections are protected, not how much room each
shrinkable section gets.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from promptweave.config import ComposerConfig
from promptweave.context.models import ContextCollection
from promptweave.context.pipeline import ContextPipeline
from promptweave.context.sources.base import ContextSource
from promptweave.composer.section import ChatTurn, Section, SectionContent
from promptweave.composer.shrinkers import (
    CompressShrinker,
    Shrinker,
    ShrinkerType,
    TruncateShrinker,
)
from promptweave.exceptions import BudgetExceededError, ConfigError
from promptweave.llm.base import LLMProvider, LLMResponse, Message
from promptweave.tokenizer import Tokenizer, default_tokenizer

logger = logging.getLogger("promptweave.composer")

DEFAULT_MODEL = "gpt-4"


class PromptComposer:
    """Assemble prioritised sections into a prompt that fits the context window.

    Usage:
        composer = (
            PromptComposer(tokenizer)
            .model("gpt-4o")
            .reserve_output_tokens(1000)
            .section("system", "You are a support agent.", priority=100)
            .context(pipeline, priority=50)
            .section("user", question, priority=90)
        )
        messages = composer.to_messages()

    Adding a section (or changing the model or reservation) invalidates a
    previous fit; rendering re-fits automatically.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        llm: LLMProvider | None = None,
        default_priority: int = 50,
    ) -> None:
        self.tokenizer = tokenizer or default_tokenizer()
        self.llm = llm
        self.default_priority = default_priority
        self._sections: list[Section] = []
        self._reserved_output_tokens = 0
        self._model: str | None = None
        self._fitted = False
        self._shrinkers: dict[str, Shrinker] = {
            ShrinkerType.TRUNCATE.value: TruncateShrinker(self.tokenizer),
            ShrinkerType.COMPRESS.value: CompressShrinker(self.tokenizer),
        }

    @classmethod
    def from_config(
        cls,
        config: ComposerConfig,
        tokenizer: Tokenizer | None = None,
        llm: LLMProvider | None = None,
    ) -> PromptComposer:
        composer = cls(tokenizer, llm, default_priority=config.default_priority)
        composer.reserve_output_tokens(config.reserved_output_tokens)
        if config.model:
            composer.model(config.model)
        return composer

    # -------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------

    def reserve_output_tokens(self, tokens: int) -> PromptComposer:
        """Hold back `tokens` of the context window for the model's answer."""
        self._reserved_output_tokens = tokens
        self._fitted = False
        return self

    def model(self, model: str) -> PromptComposer:
        """Pin the model used for token counting and the window size."""
        self._model = model
        self._fitted = False
        return self

    def section(
        self,
        name: str,
        content: SectionContent,
        priority: int | None = None,
        shrinker: ShrinkerType | str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> PromptComposer:
        """Append a section.

        Args:
            name: Section name; also picks the chat role for plain text
                ("system", "user", "assistant", ...).
            content: Plain text or a list of ``{"role", "content"}`` turns.
            priority: Higher renders first and is listed first when shrinking.
            shrinker: Strategy name for shrinking this section when over
                budget. None means the section is never altered.
            metadata: Free-form annotations carried with the section.
        """
        key = shrinker.value if isinstance(shrinker, ShrinkerType) else shrinker
        self._sections.append(
            Section(
                name=name,
                content=content,
                priority=self.default_priority if priority is None else priority,
                shrinker=key,
                metadata=dict(metadata or {}),
            )
        )
        self._fitted = False
        return self

    def context(
        self,
        content: SectionContent | ContextSource | ContextPipeline,
        priority: int | None = None,
        query: str | None = None,
        limit: int = 5,
        format: str = "numbered",
    ) -> PromptComposer:
        """Append a truncatable "context" section.

        `content` may be text, chat turns, a single ContextSource, or a
        ContextPipeline. For sources and pipelines the query defaults to the
        most recent user section, and results are rendered with
        ``ContextCollection.format_for_prompt(format)``.
        """
        if isinstance(content, (ContextSource, ContextPipeline)):
            if query is None:
                query = self._query_from_sections()
            if isinstance(content, ContextSource):
                content.initialize()
            results: ContextCollection = content.search(query, limit)
            content = results.format_for_prompt(format)

        return self.section("context", content, priority, ShrinkerType.TRUNCATE)

    def register_shrinker(self, name: str, shrinker: Shrinker) -> PromptComposer:
        self._shrinkers[name] = shrinker
        return self

    def _query_from_sections(self) -> str:
        for section in reversed(self._sections):
            if "user" in section.name.lower():
                if isinstance(section.content, str):
                    return section.content
                return " ".join(turn["content"] for turn in section.content)
        return ""

    # -------------------------------------------------------------------
    # Fitting
    # -------------------------------------------------------------------

    def fit(self) -> PromptComposer:
        """Shrink sections until the prompt fits the available budget.

        Raises:
            BudgetExceededError: If the non-shrinkable sections alone exceed
                the budget.
            ConfigError: If a section names an unregistered shrinker.
        """
        if self._fitted:
            return self

        model = self.effective_model
        available = self.available_tokens()
        ordered = _by_priority(self._sections)

        total = self._count(ordered, model)
        if total <= available:
            logger.debug(f"Prompt fits: {total}/{available} tokens for {model}")
            self._fitted = True
            return self

        logger.debug(f"Prompt over budget: {total}/{available} tokens for {model}")
        self._sections = self._shrink(ordered, available, model)
        self._fitted = True
        return self

    def _shrink(self, sections: list[Section], available: int, model: str) -> list[Section]:
        fixed = [s for s in sections if not s.can_shrink]
        shrinkable = [s for s in sections if s.can_shrink]

        used = self._count(fixed, model)
        if used > available:
            raise BudgetExceededError(used, available)

        if not shrinkable:
            # Still over budget; callers detect this via token_count()
            logger.warning(
                f"Prompt exceeds budget ({available} tokens) but has no shrinkable sections"
            )
            return fixed

        strategies = [self._get_shrinker(s.shrinker) for s in shrinkable]
        target = (available - used) // len(shrinkable)
        logger.info(
            f"Shrinking {len(shrinkable)} section(s) to {target} tokens each "
            f"({available - used} tokens left after fixed sections)"
        )

        shrunk = [
            section.with_content(strategy.shrink(section.content_as_string(), target, model))
            for section, strategy in zip(shrinkable, strategies)
        ]
        return _by_priority(fixed + shrunk)

    def _get_shrinker(self, name: str | None) -> Shrinker:
        shrinker = self._shrinkers.get(name or "")
        if shrinker is None:
            raise ConfigError(
                f"Unknown shrinker: '{name}'. Registered shrinkers: "
                f"{', '.join(sorted(self._shrinkers))}"
            )
        return shrinker

    def _count(self, sections: Sequence[Section], model: str) -> int:
        return sum(self.tokenizer.count(s.content_as_string(), model) for s in sections)

    # -------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------

    def to_messages(self) -> list[ChatTurn]:
        """Fitted prompt as chat turns, highest priority first."""
        self.fit()
        messages: list[ChatTurn] = []
        for section in _by_priority(self._sections):
            messages.extend(section.content_as_messages())
        return messages

    def to_text(self) -> str:
        """Fitted prompt as one text block, sections separated by blank lines."""
        self.fit()
        return "\n\n".join(s.content_as_string() for s in _by_priority(self._sections))

    async def run(self, **options: Any) -> LLMResponse:
        """Fit the prompt and send it to the attached LLM.

        Options are passed through to ``LLMProvider.complete``.

        Raises:
            ConfigError: If no LLM is attached.
        """
        if self.llm is None:
            raise ConfigError(
                "No LLM attached to this PromptComposer. "
                "Pass one as PromptComposer(tokenizer, llm=...)."
            )
        messages = [Message(role=m["role"], content=m["content"]) for m in self.to_messages()]
        return await self.llm.complete(messages, **options)

    # -------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------

    @property
    def effective_model(self) -> str:
        """Pinned model, else the attached LLM's model, else gpt-4."""
        if self._model:
            return self._model
        llm_model = getattr(self.llm, "model", None)
        if isinstance(llm_model, str) and llm_model:
            return llm_model
        return DEFAULT_MODEL

    @property
    def reserved_output_tokens(self) -> int:
        return self._reserved_output_tokens

    @property
    def is_fitted(self) -> bool:
        return self._fitted

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections)

    def token_count(self) -> int:
        return self._count(self._sections, self.effective_model)

    def available_tokens(self) -> int:
        window = self.tokenizer.context_window(self.effective_model)
        return window - self._reserved_output_tokens


def _by_priority(sections: Sequence[Section]) -> list[Section]:
    # sorted() is stable, so equal priorities keep insertion order
    return sorted(sections, key=lambda s: s.priority, reverse=True)

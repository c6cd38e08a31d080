"""Prompt sections: named, prioritised units of prompt content."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any, TypedDict, Union


class ChatTurn(TypedDict):
    role: str
    content: str


SectionContent = Union[str, Sequence[ChatTurn]]

# Role given to plain-text sections, keyed by lowercased section name
_ROLE_BY_NAME: dict[str, str] = {
    "system": "system",
    "user": "user",
    "question": "user",
    "query": "user",
    "assistant": "assistant",
    "response": "assistant",
}


@dataclass(frozen=True)
class Section:
    """A named chunk of prompt content.

    Content is either plain text or a sequence of chat turns. A section with
    no ``shrinker`` is never modified when fitting: it fits whole or the fit
    fails.
    """

    name: str
    content: SectionContent
    priority: int = 50  # higher = more important
    shrinker: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.content, str):
            return
        turns = tuple(self.content)
        for turn in turns:
            if not isinstance(turn, dict) or "role" not in turn or "content" not in turn:
                raise ValueError(
                    f"Section '{self.name}': chat content must be a sequence of "
                    f"{{'role': ..., 'content': ...}} mappings"
                )
        object.__setattr__(self, "content", turns)

    @property
    def is_chat(self) -> bool:
        return not isinstance(self.content, str)

    @property
    def can_shrink(self) -> bool:
        return self.shrinker is not None

    def content_as_string(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return "\n\n".join(
            f"{turn['role'].capitalize()}: {turn['content']}" for turn in self.content
        )

    def content_as_messages(self) -> list[ChatTurn]:
        if not isinstance(self.content, str):
            return [ChatTurn(role=t["role"], content=t["content"]) for t in self.content]
        role = _ROLE_BY_NAME.get(self.name.lower(), "user")
        return [ChatTurn(role=role, content=self.content)]

    def with_content(self, content: SectionContent) -> Section:
        return replace(self, content=content)

    def with_metadata(self, metadata: dict[str, Any]) -> Section:
        return replace(self, metadata={**self.metadata, **metadata})

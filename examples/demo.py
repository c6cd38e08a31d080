#!/usr/bin/env python3
"""Demo: Using promptweave as a Python library.

This shows how to aggregate context from several sources and fit it into a
model's context window, not just how to use the CLI.
"""

from promptweave.composer import PromptComposer, ShrinkerType
from promptweave.context import ContextPipeline, StaticSource
from promptweave.tokenizer import ApproximateTokenizer

FAQS = [
    "To reset your password, open account settings and choose 'Reset password'.",
    "Refunds are issued within 5 business days of receiving the returned item.",
    "Shipping is free for orders over $50 within the continental US.",
]

POLICIES = [
    "Refunds for digital goods are only available within 14 days of purchase.",
    "Accounts inactive for two years are archived and must be restored by support.",
]


def main():
    # ApproximateTokenizer needs no downloads; swap in TiktokenTokenizer for exact counts
    tokenizer = ApproximateTokenizer()

    # 1. Aggregate context from two sources
    pipeline = ContextPipeline(
        [
            StaticSource.from_strings(FAQS, name="faqs"),
            StaticSource.from_strings(POLICIES, name="policies"),
        ]
    )

    print("--- Searching 'refunds returned item' ---")
    results = pipeline.search("refunds returned item", limit=3)
    for item in results:
        print(f"  [{item.source}] {item.score:.2f}  {item.content}")

    # 2. Compose a prompt under a tight budget
    question = "How long do refunds take?"
    composer = (
        PromptComposer(tokenizer)
        .model("gpt-4")
        .reserve_output_tokens(8100)
        .section("system", "You are a concise support agent.", priority=100)
        .section("user", question, priority=90)
        .context(pipeline, priority=50, format="markdown")
        .section("notes", "Internal  **notes**  that can be squeezed. " * 20,
                 priority=10, shrinker=ShrinkerType.COMPRESS)
    )

    print(f"\n--- Prompt ({composer.available_tokens()} tokens available) ---")
    for message in composer.to_messages():
        print(f"  {message['role']}: {message['content'][:70]!r}")
    print(f"\nUsed {composer.token_count()} of {composer.available_tokens()} tokens")

    pipeline.cleanup()


if __name__ == "__main__":
    main()

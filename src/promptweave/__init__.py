"""promptweave - fit ranked, multi-source context into a model's token budget."""

__version__ = "0.1.0"

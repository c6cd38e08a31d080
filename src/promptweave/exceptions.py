"""Custom exceptions for promptweave."""


class PromptWeaveError(Exception):
    """Base exception for all promptweave errors."""


class ConfigError(PromptWeaveError):
    """Configuration-related errors (unknown shrinker, missing LLM, bad keys)."""


ConfigurationError = ConfigError


class BudgetExceededError(PromptWeaveError):
    """Raised when non-shrinkable sections alone exceed the token budget."""

    def __init__(self, used_tokens: int, available_tokens: int):
        self.used_tokens = used_tokens
        self.available_tokens = available_tokens
        super().__init__(
            f"Non-shrinkable sections ({used_tokens} tokens) exceed available budget "
            f"({available_tokens} tokens). Increase the context window, reserve fewer "
            f"output tokens, or mark more sections as shrinkable."
        )


class LLMError(PromptWeaveError):
    """LLM provider errors."""


class ProviderNotAvailableError(LLMError):
    """Raised when an LLM provider's SDK is not installed."""

    def __init__(self, provider: str, package: str):
        super().__init__(
            f"Provider '{provider}' requires the '{package}' package. "
            f"Install it with: pip install promptweave[{provider}]"
        )

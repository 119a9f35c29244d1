"""Abstract base classes for AxtarGet providers and custom exceptions."""

from abc import ABC, abstractmethod

# --- Exceptions ---


class ProviderError(Exception):
    """Base exception for all provider errors."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class RateLimitError(ProviderError):
    """Raised when a provider hits its rate limit (HTTP 429)."""

    def __init__(self, provider_name: str, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        msg = "Rate limit exceeded"
        if retry_after is not None:
            msg += f" (retry after {retry_after}s)"
        super().__init__(provider_name, msg)


class ProviderTimeoutError(ProviderError):
    """Raised when a provider request times out."""

    def __init__(self, provider_name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(provider_name, f"Request timed out after {timeout}s")


# --- Abstract Base Classes ---


class LLMProvider(ABC):
    """Abstract base class for text-generation providers."""

    name: str

    @abstractmethod
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a reply for the assembled prompts.

        Args:
            system_prompt: Persona, rules and context for the model.
            user_prompt: The user's current message.

        Returns:
            Generated response text.

        Raises:
            ProviderError: On API or processing failure.
            RateLimitError: When rate limit is hit.
            ProviderTimeoutError: When request exceeds timeout.
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if this provider is configured and reachable."""


class SearchProvider(ABC):
    """Abstract base class for instant-answer search providers."""

    name: str

    @abstractmethod
    async def lookup(self, query: str) -> str:
        """Look up a short answer for ``query``.

        Returns:
            Answer text, or an empty string when the provider has none.

        Raises:
            ProviderError: On transport, HTTP or parsing failure.
        """

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if this provider is reachable."""

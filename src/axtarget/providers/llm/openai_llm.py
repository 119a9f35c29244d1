"""OpenAI LLM provider — completes chat prompts via the chat completions API."""

import logging

import httpx

from axtarget.config import get_config
from axtarget.providers.base import (
    LLMProvider,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

_OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
_OPENAI_MODELS_URL = "https://api.openai.com/v1/models"


def _build_messages(system_prompt: str, user_prompt: str) -> list[dict]:
    """Build the messages list for the chat completions API."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def _parse_retry_after_header(response: httpx.Response) -> float | None:
    """Extract retry-after seconds from response headers."""
    value = response.headers.get("retry-after")
    if value:
        try:
            return float(value)
        except ValueError:
            pass
    return None


class OpenAICompletionProvider(LLMProvider):
    """Completion client with a fixed model and output token budget."""

    name = "openai_llm"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider. Unset arguments come from the shared config.

        Args:
            api_key: OpenAI API key.
            model: Model identifier (e.g. "gpt-3.5-turbo").
            max_tokens: Response length cap.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        config = get_config()
        self._api_key = config.openai_api_key if api_key is None else api_key
        self._model = model or config.llm_model
        self._max_tokens = max_tokens or config.llm_max_tokens
        self._timeout = config.llm_timeout if timeout is None else timeout
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a reply for the assembled prompts.

        Args:
            system_prompt: Persona, rules and context for the model.
            user_prompt: The user's current message.

        Returns:
            Generated response text.

        Raises:
            RateLimitError: On HTTP 429.
            ProviderError: On auth, server or API errors, or a malformed reply.
            ProviderTimeoutError: When request exceeds llm_timeout.
        """
        if not self._api_key:
            raise ProviderError(self.name, "OpenAI API key not configured")

        payload = {
            "model": self._model,
            "messages": _build_messages(system_prompt, user_prompt),
            "max_tokens": self._max_tokens,
        }

        try:
            async with self._client(self._timeout) as client:
                response = await client.post(
                    _OPENAI_CHAT_URL,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )

            if response.status_code == 429:
                retry_after = _parse_retry_after_header(response)
                raise RateLimitError(self.name, retry_after=retry_after)

            if response.status_code >= 500:
                raise ProviderError(
                    self.name,
                    f"Server error {response.status_code}: {response.text}",
                )

            if response.status_code != 200:
                raise ProviderError(
                    self.name,
                    f"API error {response.status_code}: {response.text}",
                )

            data = response.json()
            text = (data["choices"][0]["message"]["content"] or "").strip()

            if not text:
                raise ProviderError(self.name, "OpenAI returned empty response")

            logger.debug("OpenAI LLM: generated %d chars", len(text))
            return text

        except (RateLimitError, ProviderError, ProviderTimeoutError):
            raise
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self._timeout) from e
        except Exception as e:
            raise ProviderError(self.name, f"Generation failed: {e}") from e

    async def is_available(self) -> bool:
        """Check if the OpenAI API key is configured and valid."""
        if not self._api_key:
            return False
        try:
            async with self._client(5.0) as client:
                response = await client.get(
                    _OPENAI_MODELS_URL,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
            return response.status_code == 200
        except Exception:
            logger.warning("OpenAI LLM: availability check failed")
            return False

"""DuckDuckGo Instant Answer provider — short factual snippets, no API key required."""

import logging

import httpx

from axtarget.config import get_config
from axtarget.providers.base import (
    ProviderError,
    ProviderTimeoutError,
    SearchProvider,
)

logger = logging.getLogger(__name__)

_DDG_API_URL = "https://api.duckduckgo.com/"


def _extract_answer(data: dict) -> str:
    """Prefer the abstract, fall back to the direct answer."""
    abstract = data.get("AbstractText")
    if isinstance(abstract, str) and abstract:
        return abstract
    answer = data.get("Answer")
    if isinstance(answer, str) and answer:
        return answer
    return ""


class DuckDuckGoInstantAnswer(SearchProvider):
    """Single-shot lookup against the DuckDuckGo Instant Answer API."""

    name = "duckduckgo"

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = get_config().search_timeout if timeout is None else timeout
        self._transport = transport

    async def lookup(self, query: str) -> str:
        """Look up an instant answer for ``query``.

        Args:
            query: Free-text query, sent URL-encoded.

        Returns:
            AbstractText, else Answer, else an empty string.

        Raises:
            ProviderTimeoutError: When the request exceeds search_timeout.
            ProviderError: On HTTP errors or an unparsable body.
        """
        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "skip_disambig": "1",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport,
            ) as client:
                response = await client.get(_DDG_API_URL, params=params)

            if response.status_code != 200:
                raise ProviderError(
                    self.name, f"API error {response.status_code}",
                )

            data = response.json()
            if not isinstance(data, dict):
                raise ProviderError(self.name, "Unexpected response shape")

            text = _extract_answer(data)
            logger.debug("DuckDuckGo: %d chars for %r", len(text), query)
            return text

        except ProviderError:
            raise
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self._timeout) from e
        except Exception as e:
            raise ProviderError(self.name, f"Lookup failed: {e}") from e

    async def is_available(self) -> bool:
        """Check that the Instant Answer endpoint responds."""
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=self._transport) as client:
                response = await client.get(
                    _DDG_API_URL, params={"q": "python", "format": "json"},
                )
            return response.status_code == 200
        except Exception:
            logger.warning("DuckDuckGo: availability check failed")
            return False

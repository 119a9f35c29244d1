"""Web search augmentation — grounds recency questions with an instant answer.

Best-effort by contract: a slow, failing or empty lookup degrades to an
empty string and never reaches the user as an error.
"""

import logging

from axtarget.providers.base import SearchProvider
from axtarget.tools.intent import IntentDetector, KeywordIntentDetector

logger = logging.getLogger(__name__)


class SearchAugmenter:
    """Wraps a SearchProvider with a trigger policy and failure isolation."""

    def __init__(
        self,
        provider: SearchProvider,
        detector: IntentDetector | None = None,
    ) -> None:
        """Initialize the augmenter.

        Args:
            provider: Instant-answer provider used for lookups.
            detector: Trigger policy. Defaults to the keyword detector.
        """
        self._provider = provider
        self._detector = detector or KeywordIntentDetector()

    def needs_search(self, message: str) -> bool:
        """Return True if the message should be augmented with a lookup."""
        return self._detector.needs_search(message)

    async def augment(self, query: str) -> str:
        """Search for ``query`` and return plain text, or "" on any failure.

        Args:
            query: The user's message, used verbatim as the search query.

        Returns:
            The provider's answer text, or an empty string.
        """
        logger.info("Web search: %r", query)

        try:
            text = await self._provider.lookup(query)
        except Exception as e:
            logger.warning("Web search failed (continuing without it): %s", e)
            return ""

        if text:
            logger.info("Web search returned %d chars for %r", len(text), query)
        else:
            logger.info("Web search found nothing for %r", query)
        return text or ""

    @property
    def provider(self) -> SearchProvider:
        return self._provider

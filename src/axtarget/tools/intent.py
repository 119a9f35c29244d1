"""Search intent detection — decides whether a message needs a web lookup."""

from typing import Protocol

# Terms for "latest news", "today", "now", "current", "new", "latest",
# "internet", "search" and "find".
SEARCH_KEYWORDS: tuple[str, ...] = (
    "son xəbərlər",
    "bugün",
    "indi",
    "cari",
    "yeni",
    "son",
    "güncel",
    "internet",
    "axtarış",
    "tap",
    "axtar",
)


class IntentDetector(Protocol):
    """Anything that can tell whether a message asks for fresh information."""

    def needs_search(self, message: str) -> bool: ...


class KeywordIntentDetector:
    """Case-insensitive substring match over a static keyword list.

    Fragile on phrasing ("tap" also matches "tapmaca"), kept for parity
    with the deployed behavior.
    """

    def __init__(self, keywords: tuple[str, ...] | list[str] = SEARCH_KEYWORDS) -> None:
        self._keywords = tuple(k.lower() for k in keywords)

    def needs_search(self, message: str) -> bool:
        lowered = message.lower()
        return any(keyword in lowered for keyword in self._keywords)

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

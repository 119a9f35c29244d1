"""Chat turns and request payload parsing with a sliding history window."""

import logging
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

Role = Literal["user", "assistant"]


class InvalidRequestError(ValueError):
    """Raised when a chat payload is missing its message or is malformed."""


@dataclass(frozen=True)
class ChatTurn:
    """One message in a conversation, tagged with its author role."""

    role: Role
    content: str


@dataclass(frozen=True)
class PendingRequest:
    """A validated chat request, alive for one pipeline run."""

    message: str
    history: tuple[ChatTurn, ...] = ()


class _TurnPayload(BaseModel):
    role: str
    content: str


class _ChatPayload(BaseModel):
    message: Any = None
    history: list[_TurnPayload] | None = None


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, so an emoji outside the BMP counts as 2."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def trim_history(turns: list[ChatTurn] | tuple[ChatTurn, ...], max_turns: int) -> tuple[ChatTurn, ...]:
    """Keep only the most recent ``max_turns`` turns.

    Args:
        turns: Turns in chronological order.
        max_turns: Maximum number of turns to retain. 0 drops everything.

    Returns:
        The trailing turns as a tuple.
    """
    if max_turns <= 0:
        return ()
    if len(turns) > max_turns:
        logger.debug("History trimmed: %d -> %d turns", len(turns), max_turns)
    return tuple(turns[-max_turns:])


def parse_request(
    payload: Any,
    max_message_length: int = 1000,
    max_history_turns: int = 10,
) -> PendingRequest:
    """Validate a decoded JSON body into a PendingRequest.

    Roles other than "user" are treated as assistant turns.

    Args:
        payload: Decoded JSON body, expected ``{"message": str, "history"?: [...]}``.
        max_message_length: Longest accepted message, in UTF-16 code units.
        max_history_turns: History depth kept from the caller's list.

    Returns:
        The validated request with truncated history.

    Raises:
        InvalidRequestError: If the message is absent, empty, not a string,
            too long, or the body/history is malformed.
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    try:
        body = _ChatPayload.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(f"Malformed chat payload: {e.error_count()} errors") from e

    message = body.message
    if not isinstance(message, str) or not message:
        raise InvalidRequestError("Message is required")
    length = utf16_length(message)
    if length > max_message_length:
        raise InvalidRequestError(
            f"Message is {length} UTF-16 units, limit is {max_message_length}"
        )

    turns = [
        ChatTurn(role="user" if t.role == "user" else "assistant", content=t.content)
        for t in (body.history or [])
    ]
    return PendingRequest(message=message, history=trim_history(turns, max_history_turns))

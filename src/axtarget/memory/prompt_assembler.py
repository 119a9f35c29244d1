"""Prompt assembler — builds the system prompt from persona data plus request context.

The persona (PERSONA.md) and response rules (RULES.md) can live in an
editable prompts directory. Defaults are written there on first run, and
files are re-read when their mtime changes, so tone changes need no restart.
Without a prompts directory the built-in persona is used and assembly is a
pure function of its inputs.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from axtarget.memory.history import ChatTurn
from axtarget.memory.persona import (
    CANNED_REPLIES,
    CannedReply,
    default_persona,
    default_rules,
    render_canned_replies,
    render_closing_questions,
)

logger = logging.getLogger(__name__)

_USER_LABEL = "İstifadəçi"
_ASSISTANT_LABEL = "Mən"
_HISTORY_HEADER = "Əvvəlki söhbət:"
_SEARCH_LABEL = "İnternet məlumatı:"


@dataclass(frozen=True)
class AssembledPrompt:
    """Model input for one request."""

    system_prompt: str
    user_prompt: str


def render_history(history: list[ChatTurn] | tuple[ChatTurn, ...]) -> str:
    """Render turns as labeled lines, one per turn."""
    return "\n".join(
        f"{_USER_LABEL if turn.role == 'user' else _ASSISTANT_LABEL}: {turn.content}"
        for turn in history
    )


class PromptAssembler:
    """Assembles system and user prompts for the completion client."""

    def __init__(
        self,
        prompts_dir: str | Path | None = None,
        history_turns: int = 6,
        canned_replies: tuple[CannedReply, ...] = CANNED_REPLIES,
    ) -> None:
        """Initialize the assembler.

        Args:
            prompts_dir: Directory holding PERSONA.md and RULES.md.
                         None uses the built-in persona without touching disk.
            history_turns: Trailing turns rendered into the prompt.
            canned_replies: Trigger-phrase table rendered as instructions.
        """
        self._dir = Path(prompts_dir) if prompts_dir else None
        self._history_turns = history_turns
        self._canned_block = render_canned_replies(canned_replies)
        self._closing_block = render_closing_questions()

        # Cache: filename -> (mtime, content)
        self._cache: dict[str, tuple[float, str]] = {}

        if self._dir is not None:
            self._ensure_defaults()

    def _ensure_defaults(self) -> None:
        """Create the prompts directory and default files if they don't exist."""
        self._dir.mkdir(parents=True, exist_ok=True)

        defaults = {
            "PERSONA.md": default_persona(),
            "RULES.md": default_rules(),
        }

        for filename, content in defaults.items():
            path = self._dir / filename
            if not path.exists():
                path.write_text(content, encoding="utf-8")
                logger.info("Created default prompt file: %s", path)

    def _read_cached(self, filename: str, fallback: str) -> str:
        """Read a prompt file, using cache if mtime hasn't changed.

        Args:
            filename: Name of the file in the prompts directory.
            fallback: Built-in content used when there is no directory.

        Returns:
            File content, fallback without a directory, or "" if the file is gone.
        """
        if self._dir is None:
            return fallback.strip()

        path = self._dir / filename
        if not path.exists():
            return ""

        try:
            mtime = path.stat().st_mtime
            cached = self._cache.get(filename)

            if cached and cached[0] == mtime:
                return cached[1]

            content = path.read_text(encoding="utf-8").strip()
            self._cache[filename] = (mtime, content)
            return content
        except OSError as e:
            logger.warning("Failed to read prompt file %s: %s", filename, e)
            return ""

    def assemble(
        self,
        message: str,
        history: list[ChatTurn] | tuple[ChatTurn, ...] = (),
        search_text: str = "",
    ) -> AssembledPrompt:
        """Build the prompts for one request.

        Args:
            message: The user's message, passed through as the user prompt.
            history: Prior turns, already truncated by the caller. Only the
                     trailing ``history_turns`` are rendered.
            search_text: Augmentation text; omitted when empty.

        Returns:
            The system prompt and the unmodified user prompt.
        """
        sections: list[str] = []

        persona = self._read_cached("PERSONA.md", default_persona())
        if persona:
            sections.append(persona)

        sections.append(self._canned_block)
        sections.append(self._closing_block)

        rules = self._read_cached("RULES.md", default_rules())
        if rules:
            sections.append(rules)

        recent = tuple(history)[-self._history_turns:] if self._history_turns > 0 else ()
        if recent:
            sections.append(f"{_HISTORY_HEADER}\n{render_history(recent)}")

        if search_text:
            sections.append(f"{_SEARCH_LABEL} {search_text}")

        return AssembledPrompt(system_prompt="\n\n".join(sections), user_prompt=message)

    @property
    def prompts_dir(self) -> Path | None:
        """Return the prompts directory path, if file-backed."""
        return self._dir

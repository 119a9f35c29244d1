"""Chat request pipeline — rate limit, validate, augment, assemble, complete.

One ``handle()`` call per HTTP request. Every call ends in exactly one
CompletionResult or ErrorResult; failures never escape as exceptions.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from axtarget.config import AxtarGetConfig, get_config
from axtarget.memory.history import InvalidRequestError, PendingRequest, parse_request
from axtarget.memory.persona import CannedReplies
from axtarget.memory.prompt_assembler import PromptAssembler
from axtarget.providers.base import LLMProvider, ProviderError, RateLimitError
from axtarget.tools.web_search import SearchAugmenter
from axtarget.utils.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    RECEIVED = "received"
    RATE_LIMIT_CHECKED = "rate_limit_checked"
    VALIDATED = "validated"
    AUGMENTED = "augmented"
    PROMPT_BUILT = "prompt_built"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorKind(str, Enum):
    MISCONFIGURED = "misconfigured"
    RATE_LIMITED = "rate_limited"
    INVALID_INPUT = "invalid_input"
    UPSTREAM_ERROR = "upstream_error"


_ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.MISCONFIGURED: 500,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UPSTREAM_ERROR: 500,
}

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MISCONFIGURED: "API açarı təyin edilməyib",
    ErrorKind.RATE_LIMITED: "Çox tez-tez sorğu. Bir az gözləyin dostum!",
    ErrorKind.INVALID_INPUT: "Mesaj tələb olunur və 1000 simvoldan az olmalıdır",
    ErrorKind.UPSTREAM_ERROR: "Üzr istəyirəm dostum, bir xəta baş verdi. Yenidən cəhd et!",
}


@dataclass(frozen=True)
class CompletionResult:
    text: str
    status_code: int = 200

    def to_payload(self) -> dict[str, str]:
        return {"response": self.text}


@dataclass(frozen=True)
class ErrorResult:
    kind: ErrorKind
    user_message: str
    status_code: int

    @classmethod
    def of(cls, kind: ErrorKind) -> "ErrorResult":
        return cls(kind=kind, user_message=ERROR_MESSAGES[kind], status_code=_ERROR_STATUS[kind])

    def to_payload(self) -> dict[str, str]:
        return {"error": self.user_message}


PipelineResult = CompletionResult | ErrorResult


class ChatPipeline:
    """Coordinates the rate limiter, search augmenter, prompt assembler and LLM.

    All collaborators are injected so tests can swap in fakes. The rate
    limiter is the only state shared between requests.
    """

    def __init__(
        self,
        config: AxtarGetConfig,
        rate_limiter: FixedWindowRateLimiter,
        augmenter: SearchAugmenter,
        assembler: PromptAssembler,
        llm: LLMProvider,
        canned_replies: CannedReplies | None = None,
    ) -> None:
        self._config = config
        self._rate_limiter = rate_limiter
        self._augmenter = augmenter
        self._assembler = assembler
        self._llm = llm
        self._canned = canned_replies or CannedReplies()
        self._interaction_count = 0

    @classmethod
    def from_config(cls, config: AxtarGetConfig | None = None) -> "ChatPipeline":
        """Wire the production collaborators from configuration."""
        from axtarget.providers.llm.openai_llm import OpenAICompletionProvider
        from axtarget.providers.search.duckduckgo import DuckDuckGoInstantAnswer

        config = config or get_config()
        return cls(
            config=config,
            rate_limiter=FixedWindowRateLimiter(
                max_requests=config.rate_limit_max_requests,
                window_seconds=config.rate_limit_window_seconds,
                sweep_interval=config.rate_limit_sweep_interval,
            ),
            augmenter=SearchAugmenter(
                DuckDuckGoInstantAnswer(timeout=config.search_timeout),
            ),
            assembler=PromptAssembler(
                prompts_dir=config.prompts_dir or None,
                history_turns=config.prompt_history_turns,
            ),
            llm=OpenAICompletionProvider(
                api_key=config.openai_api_key,
                model=config.llm_model,
                max_tokens=config.llm_max_tokens,
                timeout=config.llm_timeout,
            ),
        )

    def _fail(self, interaction_id: int, kind: ErrorKind) -> ErrorResult:
        logger.debug("[#%d] -> %s (%s)", interaction_id, PipelineState.FAILED.value, kind.value)
        return ErrorResult.of(kind)

    async def handle(self, identity: str, payload: Any) -> PipelineResult:
        """Run one chat request through the pipeline.

        Args:
            identity: Rate-limit key for the client.
            payload: Decoded JSON body, ``{"message": str, "history"?: [...]}``.

        Returns:
            CompletionResult on success, otherwise an ErrorResult.
        """
        self._interaction_count += 1
        interaction_id = self._interaction_count
        start = time.perf_counter()

        # Configuration defects must not consume the client's quota
        if not self._config.openai_api_key:
            logger.error("[#%d] OpenAI API key is not configured", interaction_id)
            return self._fail(interaction_id, ErrorKind.MISCONFIGURED)

        if not self._rate_limiter.admit(identity):
            return self._fail(interaction_id, ErrorKind.RATE_LIMITED)
        logger.debug("[#%d] -> %s", interaction_id, PipelineState.RATE_LIMIT_CHECKED.value)

        try:
            request = parse_request(
                payload,
                max_message_length=self._config.max_message_length,
                max_history_turns=self._config.max_history_turns,
            )
        except InvalidRequestError as e:
            logger.info("[#%d] Invalid request from %s: %s", interaction_id, identity, e)
            return self._fail(interaction_id, ErrorKind.INVALID_INPUT)
        logger.debug("[#%d] -> %s", interaction_id, PipelineState.VALIDATED.value)

        try:
            text = await self._respond(interaction_id, request)
        except RateLimitError as e:
            logger.warning(
                "[#%d] Completion provider rate limited (retry after %s s)",
                interaction_id, e.retry_after,
            )
            return self._fail(interaction_id, ErrorKind.UPSTREAM_ERROR)
        except ProviderError as e:
            logger.error("[#%d] Completion failed: %s", interaction_id, e)
            return self._fail(interaction_id, ErrorKind.UPSTREAM_ERROR)
        except Exception:
            logger.exception("[#%d] Unexpected error", interaction_id)
            return self._fail(interaction_id, ErrorKind.UPSTREAM_ERROR)

        logger.info(
            "Interaction #%d complete — %.2fs | %r → %d chars",
            interaction_id, time.perf_counter() - start,
            request.message[:80], len(text),
        )
        return CompletionResult(text=text)

    async def _respond(self, interaction_id: int, request: PendingRequest) -> str:
        search_text = ""
        if self._augmenter.needs_search(request.message):
            search_text = await self._augmenter.augment(request.message)
            logger.debug("[#%d] -> %s", interaction_id, PipelineState.AUGMENTED.value)

        prompt = self._assembler.assemble(request.message, request.history, search_text)
        logger.debug("[#%d] -> %s", interaction_id, PipelineState.PROMPT_BUILT.value)

        if self._config.intercept_canned_replies:
            canned = self._canned.match(request.message)
            if canned is not None:
                logger.info("[#%d] Answered from canned replies", interaction_id)
                return canned

        text = await self._llm.complete(prompt.system_prompt, prompt.user_prompt)
        logger.debug("[#%d] -> %s", interaction_id, PipelineState.COMPLETED.value)
        return text

    async def check_providers(self) -> dict[str, dict[str, bool | str]]:
        """Check connectivity to the completion and search providers.

        Returns:
            Dict mapping component names to their status info.
        """
        results: dict[str, dict[str, bool | str]] = {}
        providers = [("LLM", self._llm), ("Search", self._augmenter.provider)]
        for kind, provider in providers:
            try:
                available = await provider.is_available()
                results[f"{kind}/{provider.name}"] = {
                    "available": available,
                    "status": "connected" if available else "not configured",
                }
            except Exception as e:
                results[f"{kind}/{provider.name}"] = {
                    "available": False,
                    "status": f"error: {e}",
                }
        return results

    @property
    def rate_limiter(self) -> FixedWindowRateLimiter:
        return self._rate_limiter

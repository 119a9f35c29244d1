"""AxtarGet configuration system — typed settings loaded from .env."""

import logging

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_config_instance: "AxtarGetConfig | None" = None


class AxtarGetConfig(BaseSettings):
    """All AxtarGet settings, loaded from environment variables with AXTARGET_ prefix.

    The completion API key is also read from the plain OPENAI_API_KEY variable.
    """

    # API Keys
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("AXTARGET_OPENAI_API_KEY", "OPENAI_API_KEY", "openai_api_key"),
    )

    # Completion
    llm_model: str = "gpt-3.5-turbo"
    llm_max_tokens: int = 200

    # Timeouts (seconds)
    llm_timeout: float = 15.0
    search_timeout: float = 6.0

    # Rate limiting
    rate_limit_max_requests: int = 15
    rate_limit_window_seconds: float = 60.0
    rate_limit_sweep_interval: float = 300.0

    # Conversation
    max_message_length: int = 1000
    max_history_turns: int = 10
    prompt_history_turns: int = 6
    intercept_canned_replies: bool = False
    prompts_dir: str = ""  # Empty = built-in persona, no files

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = ""  # Empty = ~/.axtarget/logs/

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AXTARGET_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def validate_api_keys(self) -> None:
        """Validate that the completion API key is configured.

        Raises:
            ValueError: If no OpenAI API key is set.
        """
        if not self.openai_api_key:
            raise ValueError(
                "No completion API key configured. Set OPENAI_API_KEY "
                "or AXTARGET_OPENAI_API_KEY"
            )
        logger.info("Configured completion model: %s", self.llm_model)


def get_config() -> AxtarGetConfig:
    """Get the singleton AxtarGetConfig instance.

    Returns:
        The shared AxtarGetConfig loaded from environment.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AxtarGetConfig()
    return _config_instance


def reset_config() -> None:
    """Reset the singleton (for testing)."""
    global _config_instance
    _config_instance = None

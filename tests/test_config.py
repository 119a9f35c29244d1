"""Tests for the AxtarGet configuration system."""

import pytest

from axtarget.config import AxtarGetConfig, get_config, reset_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host credentials out of the defaults under test."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AXTARGET_OPENAI_API_KEY", raising=False)
    reset_config()
    yield
    reset_config()


class TestAxtarGetConfigDefaults:
    def test_default_values(self):
        config = AxtarGetConfig(_env_file=None)
        assert config.llm_model == "gpt-3.5-turbo"
        assert config.llm_max_tokens == 200
        assert config.llm_timeout == 15.0
        assert config.search_timeout == 6.0
        assert config.rate_limit_max_requests == 15
        assert config.rate_limit_window_seconds == 60.0
        assert config.max_message_length == 1000
        assert config.max_history_turns == 10
        assert config.prompt_history_turns == 6
        assert config.intercept_canned_replies is False
        assert config.prompts_dir == ""
        assert config.log_level == "INFO"
        assert config.log_to_file is True
        assert config.log_dir == ""

    def test_default_api_key_is_empty(self):
        config = AxtarGetConfig(_env_file=None)
        assert config.openai_api_key == ""


class TestAxtarGetConfigFromEnv:
    def test_loads_prefixed_env_vars(self, monkeypatch):
        monkeypatch.setenv("AXTARGET_RATE_LIMIT_MAX_REQUESTS", "3")
        monkeypatch.setenv("AXTARGET_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("AXTARGET_INTERCEPT_CANNED_REPLIES", "true")

        config = AxtarGetConfig(_env_file=None)
        assert config.rate_limit_max_requests == 3
        assert config.log_level == "DEBUG"
        assert config.intercept_canned_replies is True

    def test_plain_openai_key_is_accepted(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-plain")
        config = AxtarGetConfig(_env_file=None)
        assert config.openai_api_key == "sk-plain"

    def test_prefixed_openai_key_is_accepted(self, monkeypatch):
        monkeypatch.setenv("AXTARGET_OPENAI_API_KEY", "sk-prefixed")
        config = AxtarGetConfig(_env_file=None)
        assert config.openai_api_key == "sk-prefixed"

    def test_key_by_field_name(self):
        config = AxtarGetConfig(_env_file=None, openai_api_key="sk-kwarg")
        assert config.openai_api_key == "sk-kwarg"


class TestAPIKeyValidation:
    def test_missing_key_raises_error(self):
        config = AxtarGetConfig(_env_file=None)
        with pytest.raises(ValueError, match="No completion API key configured"):
            config.validate_api_keys()

    def test_key_is_sufficient(self):
        config = AxtarGetConfig(_env_file=None, openai_api_key="sk-test")
        config.validate_api_keys()  # should not raise


class TestSingleton:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset_config_rebuilds(self):
        first = get_config()
        reset_config()
        assert get_config() is not first

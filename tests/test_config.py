"""
Tests for configuration loading and validation.
"""

import pytest

from routerchat.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    MAX_AGENT_ITERATIONS,
    ClientConfig,
    LoopConfig,
)
from routerchat.errors import ConfigError

ENV_VARS = [
    "OPENROUTER_API_KEY",
    "ROUTERCHAT_MODEL",
    "ROUTERCHAT_MAX_TOKENS",
    "ROUTERCHAT_TEMPERATURE",
    "ROUTERCHAT_SYSTEM_PROMPT",
    "ROUTERCHAT_BASE_URL",
    "ROUTERCHAT_TIMEOUT",
    "AGENT_MAX_ITERATIONS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestClientConfigFromEnv:
    """Tests for ClientConfig.from_env."""

    def test_defaults(self) -> None:
        config = ClientConfig.from_env()

        assert config.api_key == ""
        assert config.model == DEFAULT_MODEL
        assert config.max_tokens == DEFAULT_MAX_TOKENS
        assert config.temperature is None
        assert config.system_prompt is None
        assert config.base_url == DEFAULT_BASE_URL

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
        monkeypatch.setenv("ROUTERCHAT_MODEL", "meta-llama/llama-3-70b-instruct")
        monkeypatch.setenv("ROUTERCHAT_MAX_TOKENS", "2048")
        monkeypatch.setenv("ROUTERCHAT_TEMPERATURE", "0.7")
        monkeypatch.setenv("ROUTERCHAT_SYSTEM_PROMPT", "Test system prompt")

        config = ClientConfig.from_env()

        assert config.api_key == "sk-test"
        assert config.model == "meta-llama/llama-3-70b-instruct"
        assert config.max_tokens == 2048
        assert config.temperature == pytest.approx(0.7)
        assert config.system_prompt == "Test system prompt"

    def test_empty_system_prompt_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTERCHAT_SYSTEM_PROMPT", "")
        assert ClientConfig.from_env().system_prompt is None

    def test_non_numeric_max_tokens(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTERCHAT_MAX_TOKENS", "lots")
        with pytest.raises(ConfigError, match="ROUTERCHAT_MAX_TOKENS"):
            ClientConfig.from_env()

    def test_non_numeric_temperature(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTERCHAT_TEMPERATURE", "warm")
        with pytest.raises(ConfigError, match="ROUTERCHAT_TEMPERATURE"):
            ClientConfig.from_env()


class TestClientConfigValidate:
    """Tests for ClientConfig.validate."""

    def test_valid_config_returns_self(self) -> None:
        config = ClientConfig(api_key="sk-test")
        assert config.validate() is config

    def test_missing_api_key(self) -> None:
        with pytest.raises(ConfigError, match="API key"):
            ClientConfig(api_key="").validate()

    def test_non_positive_max_tokens(self) -> None:
        with pytest.raises(ConfigError, match="max_tokens"):
            ClientConfig(api_key="k", max_tokens=0).validate()

    def test_temperature_out_of_range(self) -> None:
        with pytest.raises(ConfigError, match="temperature"):
            ClientConfig(api_key="k", temperature=3.5).validate()


class TestLoopConfig:
    """Tests for LoopConfig."""

    def test_default_cap_is_twenty(self) -> None:
        assert LoopConfig().max_iterations == MAX_AGENT_ITERATIONS == 20

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_MAX_ITERATIONS", "5")
        assert LoopConfig.from_env().max_iterations == 5

    def test_from_env_rejects_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_MAX_ITERATIONS", "0")
        with pytest.raises(ConfigError):
            LoopConfig.from_env()

"""
Configuration for the chat agent.

All configuration is loaded from environment variables, with the CLI able
to override individual fields. The endpoint is any OpenAI-compatible
chat-completion API; OpenRouter is the default.
"""

import os
from dataclasses import dataclass

from routerchat.errors import ConfigError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TIMEOUT = 180.0  # LLM responses can take a while
MAX_AGENT_ITERATIONS = 20


def _env_number(name: str, default: str, convert: type) -> int | float:
    raw = os.getenv(name, default)
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a {convert.__name__}, got {raw!r}") from e


def _env_optional(name: str) -> str | None:
    value = os.getenv(name)
    return value if value else None


@dataclass
class ClientConfig:
    """Configuration for talking to the chat-completion endpoint."""
    api_key: str
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float | None = None
    system_prompt: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        temperature = _env_optional("ROUTERCHAT_TEMPERATURE")
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY", ""),
            model=os.getenv("ROUTERCHAT_MODEL", DEFAULT_MODEL),
            max_tokens=_env_number("ROUTERCHAT_MAX_TOKENS", str(DEFAULT_MAX_TOKENS), int),
            temperature=(
                _env_number("ROUTERCHAT_TEMPERATURE", temperature, float)
                if temperature is not None else None
            ),
            system_prompt=_env_optional("ROUTERCHAT_SYSTEM_PROMPT"),
            base_url=os.getenv("ROUTERCHAT_BASE_URL", DEFAULT_BASE_URL),
            timeout=_env_number("ROUTERCHAT_TIMEOUT", str(DEFAULT_TIMEOUT), float),
        )

    def validate(self) -> "ClientConfig":
        """Raise ConfigError if the configuration cannot be used."""
        if not self.api_key:
            raise ConfigError("API key is required (set OPENROUTER_API_KEY)")
        if not self.model:
            raise ConfigError("model id must not be empty")
        if self.max_tokens <= 0:
            raise ConfigError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ConfigError(f"temperature must be between 0 and 2, got {self.temperature}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        return self


@dataclass
class LoopConfig:
    """
    Configuration for the agent loop.

    max_iterations bounds the number of round trips to the model in one
    exchange. Running out is an error, not a truncated answer.
    """
    max_iterations: int = MAX_AGENT_ITERATIONS

    @classmethod
    def from_env(cls) -> "LoopConfig":
        """Load configuration from environment variables."""
        config = cls(
            max_iterations=_env_number("AGENT_MAX_ITERATIONS", str(MAX_AGENT_ITERATIONS), int),
        )
        if config.max_iterations < 1:
            raise ConfigError(f"AGENT_MAX_ITERATIONS must be at least 1, got {config.max_iterations}")
        return config

"""Configuration management for Gemini Reply."""

import os
from dataclasses import dataclass, field, asdict
from typing import Optional, Any
from pathlib import Path

import yaml
from dotenv import load_dotenv


API_KEY_ENV_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY")


def _api_key_from_env() -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass
class LLMConfig:
    """Configuration for the Gemini generateContent endpoint."""

    api_key: Optional[str] = None
    model_name: str = "gemini-1.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com"
    timeout: float = 60.0
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_tokens: int = 1024

    def __post_init__(self):
        if self.api_key is None:
            load_dotenv()
            self.api_key = _api_key_from_env()

    @property
    def endpoint(self) -> str:
        """URL of the generateContent method for the configured model."""
        return f"{self.base_url.rstrip('/')}/v1beta/models/{self.model_name}:generateContent"


@dataclass
class RetryConfig:
    """Retry policy for the API call.

    Rate-limited attempts back off exponentially (backoff_base ** (attempt + 2)
    seconds); any other failure waits a fixed retry_delay.
    """

    max_retries: int = 3
    backoff_base: float = 2.0
    retry_delay: float = 2.0

    def backoff_for(self, attempt: int) -> float:
        """Delay after a rate-limited attempt (0-based)."""
        return self.backoff_base ** (attempt + 2)


@dataclass
class RateLimiterConfig:
    """Minimum spacing between successive requests."""

    min_request_interval: float = 2.0


@dataclass
class Config:
    """Main configuration container."""

    llm: LLMConfig = field(default_factory=LLMConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    rate_limiter: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    log_level: str = "INFO"

    def __post_init__(self):
        load_dotenv()
        self.log_level = os.getenv("GEMINI_REPLY_LOG_LEVEL", self.log_level)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables.

        ``.env`` loading and the ``GEMINI_REPLY_LOG_LEVEL`` override happen in
        ``__post_init__``, so defaults are all that is needed here.
        """
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        data = asdict(self)
        # Never write the key out
        data["llm"].pop("api_key", None)
        return data

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        llm_data = data.get("llm", {}) or {}
        retry_data = data.get("retry", {}) or {}
        rate_limiter_data = data.get("rate_limiter", {}) or {}

        return cls(
            llm=LLMConfig(**llm_data),
            retry=RetryConfig(**retry_data),
            rate_limiter=RateLimiterConfig(**rate_limiter_data),
            log_level=data.get("log_level", "INFO"),
        )

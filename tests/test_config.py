"""Tests for configuration."""

from pathlib import Path
from unittest.mock import patch

import yaml

from gemini_reply.config import Config, LLMConfig, RetryConfig, RateLimiterConfig


class TestLLMConfig:
    """Tests for LLMConfig."""

    def test_defaults(self):
        config = LLMConfig(api_key="k")
        assert config.model_name == "gemini-1.5-flash"
        assert config.timeout == 60.0
        assert config.max_tokens == 1024

    def test_endpoint(self):
        """The endpoint is built from base URL and model name."""
        config = LLMConfig(api_key="k", base_url="https://example.test/", model_name="gemini-pro")
        assert config.endpoint == "https://example.test/v1beta/models/gemini-pro:generateContent"

    def test_api_key_from_env(self, monkeypatch):
        """GOOGLE_API_KEY is read when no key is passed."""
        monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with patch("gemini_reply.config.load_dotenv"):
            assert LLMConfig().api_key == "from-env"

    def test_api_key_fallback_env(self, monkeypatch):
        """GEMINI_API_KEY is used when GOOGLE_API_KEY is unset."""
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-env")
        with patch("gemini_reply.config.load_dotenv"):
            assert LLMConfig().api_key == "gemini-env"

    def test_api_key_missing(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with patch("gemini_reply.config.load_dotenv"):
            assert LLMConfig().api_key is None


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_backoff_schedule(self):
        """Rate-limit backoff doubles from 4 seconds."""
        retry = RetryConfig()
        assert [retry.backoff_for(attempt) for attempt in range(3)] == [4.0, 8.0, 16.0]

    def test_custom_base(self):
        assert RetryConfig(backoff_base=3.0).backoff_for(0) == 9.0


class TestConfig:
    """Tests for the main Config container."""

    def test_to_dict_drops_api_key(self):
        config = Config(llm=LLMConfig(api_key="secret"))
        data = config.to_dict()
        assert "api_key" not in data["llm"]
        assert data["retry"]["max_retries"] == 3
        assert data["rate_limiter"]["min_request_interval"] == 2.0

    def test_yaml_round_trip(self, tmp_path: Path, monkeypatch):
        """Saved settings load back, without the key."""
        monkeypatch.delenv("GEMINI_REPLY_LOG_LEVEL", raising=False)
        path = tmp_path / "config.yaml"
        Config(
            llm=LLMConfig(api_key="secret", model_name="gemini-pro", temperature=0.2),
            retry=RetryConfig(max_retries=5),
            rate_limiter=RateLimiterConfig(min_request_interval=1.0),
            log_level="DEBUG",
        ).to_yaml(path)

        assert "secret" not in path.read_text()

        loaded = Config.from_yaml(path)
        assert loaded.llm.model_name == "gemini-pro"
        assert loaded.llm.temperature == 0.2
        assert loaded.retry.max_retries == 5
        assert loaded.rate_limiter.min_request_interval == 1.0
        assert loaded.log_level == "DEBUG"

    def test_from_yaml_partial(self, tmp_path: Path):
        """Sections missing from the file keep their defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"llm": {"api_key": "k", "model_name": "gemini-2.0-flash"}}))

        loaded = Config.from_yaml(path)

        assert loaded.llm.api_key == "k"
        assert loaded.llm.model_name == "gemini-2.0-flash"
        assert loaded.retry == RetryConfig()
        assert loaded.rate_limiter == RateLimiterConfig()

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_REPLY_LOG_LEVEL", "WARNING")
        assert Config.from_env().log_level == "WARNING"

    def test_from_env_default_log_level(self, monkeypatch):
        """Without the override variable, from_env keeps the INFO default."""
        monkeypatch.delenv("GEMINI_REPLY_LOG_LEVEL", raising=False)
        with patch("gemini_reply.config.load_dotenv"):
            assert Config.from_env().log_level == "INFO"

    def test_env_log_level_applies_to_direct_construction(self, monkeypatch):
        """The override is applied by the constructor itself, not only by from_env."""
        monkeypatch.setenv("GEMINI_REPLY_LOG_LEVEL", "ERROR")
        with patch("gemini_reply.config.load_dotenv"):
            assert Config(llm=LLMConfig(api_key="k")).log_level == "ERROR"

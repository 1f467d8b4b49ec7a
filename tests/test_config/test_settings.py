"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, get_settings
from src.embedding.config import EmbeddingConfig
from src.sentiment.config import SentimentConfig


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.metrics_enabled is False
        assert not settings.is_production

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        settings = get_settings()

        assert settings.is_production
        assert settings.log_level == "WARNING"

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            Settings(metrics_port=0)


class TestComponentConfig:
    """Tests for the prefixed component settings."""

    def test_sentiment_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SENTIMENT_DEBOUNCE_SECONDS", "0.25")
        monkeypatch.setenv("SENTIMENT_EMBEDDING_DIMENSIONS", "64")

        config = SentimentConfig()

        assert config.debounce_seconds == 0.25
        assert config.embedding_dimensions == 64
        assert config.lexicon_neutral_band == 0.1

    def test_sentiment_rejects_negative_debounce(self):
        with pytest.raises(ValidationError):
            SentimentConfig(debounce_seconds=-1)

    def test_embedding_env_prefix(self, monkeypatch):
        monkeypatch.setenv("EMBEDDING_DEVICE", "cpu")
        monkeypatch.setenv("EMBEDDING_MODEL_NAME", "sentence-transformers/all-mpnet-base-v2")

        config = EmbeddingConfig()

        assert config.device == "cpu"
        assert config.model_name == "sentence-transformers/all-mpnet-base-v2"

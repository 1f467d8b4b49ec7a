"""
Sentiment pipeline configuration.

Provides Pydantic settings for the analysis scheduler and the two
classifier tiers (lexicon and embedding heuristics).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SentimentConfig(BaseSettings):
    """
    Configuration for sentiment classification and scheduling.

    Settings can be overridden via environment variables prefixed with SENTIMENT_.

    Example:
        SENTIMENT_DEBOUNCE_SECONDS=0.25
        SENTIMENT_EMBEDDING_DIMENSIONS=64
    """

    model_config = SettingsConfigDict(
        env_prefix="SENTIMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Scheduling
    debounce_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=10.0,
        description="Quiet period before analysing text in real-time mode",
    )

    # Lexicon tier
    lexicon_neutral_band: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="|score| below this is classified neutral by the lexicon tier",
    )

    # Embedding tier
    embedding_dimensions: int = Field(
        default=100,
        ge=1,
        description="Leading embedding dimensions folded into the polarity score",
    )
    embedding_neutral_band: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="|score| below this is classified neutral by the embedding tier",
    )

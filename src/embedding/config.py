"""
Embedding model configuration.

Provides Pydantic settings for the sentence embedding model that backs the
embedding sentiment tier: model selection, device placement and precision.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingConfig(BaseSettings):
    """
    Configuration for the text embedding model.

    Settings can be overridden via environment variables prefixed with EMBEDDING_.

    Example:
        EMBEDDING_MODEL_NAME=sentence-transformers/all-mpnet-base-v2
        EMBEDDING_DEVICE=cpu
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Model configuration
    model_name: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="HuggingFace model name for sentence embeddings",
    )
    max_sequence_length: int = Field(
        default=256,
        ge=16,
        le=512,
        description="Maximum token sequence length for the model",
    )
    normalize_embeddings: bool = Field(
        default=True,
        description="L2-normalize pooled embeddings",
    )

    # Runtime configuration
    use_fp16: bool = Field(
        default=True,
        description="Use FP16 (half precision) for GPU acceleration",
    )
    device: Literal["auto", "cpu", "cuda", "mps"] = Field(
        default="auto",
        description="Device for model inference (auto detects best available)",
    )

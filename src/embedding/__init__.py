"""
Embedding model module for the embedding sentiment tier.

This module provides:
- EmbeddingConfig: Configuration settings for the embedding model
- TextEmbedder / TransformerEmbedder: batched sentence embedding
- EmbeddingBatch: scoped holder for the vectors of one call
- ModelLifecycleManager / ModelStatus: async load, status and release
"""

from src.embedding.config import EmbeddingConfig
from src.embedding.lifecycle import LOAD_ERROR_MESSAGE, ModelLifecycleManager, ModelStatus
from src.embedding.service import (
    EmbeddingBatch,
    TextEmbedder,
    TransformerEmbedder,
    detect_device,
    load_embedder,
)

__all__ = [
    "EmbeddingBatch",
    "EmbeddingConfig",
    "LOAD_ERROR_MESSAGE",
    "ModelLifecycleManager",
    "ModelStatus",
    "TextEmbedder",
    "TransformerEmbedder",
    "detect_device",
    "load_embedder",
]

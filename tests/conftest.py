"""Pytest fixtures for live-sentiment tests."""

import asyncio
from collections.abc import Sequence

import pytest

from src.embedding.service import EmbeddingBatch
from src.sentiment.config import SentimentConfig

# 100 dims, +0.5 on even indices -> alternating-sign score 0.25 (positive)
POSITIVE_VECTOR = [0.5, 0.0] * 50
# -0.5 on odd indices -> score -0.25 (negative)
NEGATIVE_VECTOR = [0.0, 0.5] * 50
NEUTRAL_VECTOR = [0.0] * 100


class FakeEmbedder:
    """In-memory TextEmbedder returning a fixed vector per text."""

    def __init__(
        self,
        vector: Sequence[float] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.vector = list(vector) if vector is not None else list(POSITIVE_VECTOR)
        self.error = error
        self.delay = delay
        self.calls: list[list[str]] = []
        self.batches: list[EmbeddingBatch] = []
        self.disposed = False

    async def embed(self, texts: Sequence[str]) -> EmbeddingBatch:
        self.calls.append(list(texts))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        batch = EmbeddingBatch([self.vector for _ in texts])
        self.batches.append(batch)
        return batch

    def dispose(self) -> None:
        self.disposed = True


class GatedLoader:
    """Model loader that blocks until ``release`` is set."""

    def __init__(self, vector: Sequence[float] | None = None, error: Exception | None = None):
        self.vector = vector
        self.error = error
        self.release = asyncio.Event()
        self.calls = 0
        self.models: list[FakeEmbedder] = []

    async def __call__(self) -> FakeEmbedder:
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        model = FakeEmbedder(self.vector)
        self.models.append(model)
        return model


@pytest.fixture
def fast_config() -> SentimentConfig:
    """Sentiment config with a short debounce window for tests."""
    return SentimentConfig(debounce_seconds=0.05)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def failing_embedder() -> FakeEmbedder:
    return FakeEmbedder(error=RuntimeError("inference exploded"))


@pytest.fixture
def gated_loader() -> GatedLoader:
    return GatedLoader()


@pytest.fixture
def ready_loader():
    """Loader that returns a fresh positive-leaning FakeEmbedder immediately."""
    models: list[FakeEmbedder] = []

    async def load() -> FakeEmbedder:
        model = FakeEmbedder(POSITIVE_VECTOR)
        models.append(model)
        return model

    load.models = models  # type: ignore[attr-defined]
    return load


@pytest.fixture
def failing_loader():
    async def load() -> FakeEmbedder:
        raise OSError("model files not found")

    return load

"""
Two-tier sentiment classification service.

Chooses the classifier tier from the model lifecycle status:
- READY: embedding heuristic (lexicon fallback on per-call failure)
- anything else: lexicon heuristic, the embedding tier is never invoked

Empty or whitespace-only text short-circuits to the neutral zero result
without touching either tier.
"""

import time
from typing import Any

import structlog

from src.embedding.lifecycle import ModelLifecycleManager
from src.observability.metrics import get_metrics
from src.sentiment.config import SentimentConfig
from src.sentiment.embedding_classifier import classify_with_model
from src.sentiment.lexicon import classify_lexicon
from src.sentiment.schemas import SentimentResult

logger = structlog.get_logger(__name__)


class SentimentService:
    """
    Classify text with whichever tier the current model status allows.

    Usage:
        models = ModelLifecycleManager()
        service = SentimentService(models)
        models.enable()
        result = await service.analyze("what a wonderful day")
    """

    def __init__(
        self,
        models: ModelLifecycleManager,
        config: SentimentConfig | None = None,
    ):
        self._models = models
        self._config = config or SentimentConfig()

    async def analyze(self, text: str) -> SentimentResult:
        """
        Analyze a single text.

        Args:
            text: Text to analyze

        Returns:
            SentimentResult (never raises for any string input)
        """
        if not text.strip():
            return SentimentResult.empty()

        start_time = time.perf_counter()
        metrics = get_metrics()

        # Borrowed for this call only; never stored on the service
        model = self._models.model

        if model is None:
            tier = "lexicon"
            result = classify_lexicon(text, self._config.lexicon_neutral_band)
        else:
            tier = "embedding"
            result = await classify_with_model(
                text,
                model,
                max_dimensions=self._config.embedding_dimensions,
                neutral_band=self._config.embedding_neutral_band,
                lexicon_neutral_band=self._config.lexicon_neutral_band,
            )

        latency = time.perf_counter() - start_time
        metrics.record_sentiment_latency(tier, latency)
        metrics.record_sentiment_analyzed(tier, result.sentiment, result.confidence)

        logger.debug(
            "Sentiment analyzed",
            tier=tier,
            sentiment=result.sentiment,
            confidence=round(result.confidence, 4),
            score=round(result.score, 4),
            processing_time_ms=round(latency * 1000, 2),
        )
        return result

    def get_stats(self) -> dict[str, Any]:
        """Get service statistics."""
        return {
            "model_status": self._models.status.value,
            "tier": "embedding" if self._models.model is not None else "lexicon",
            "embedding_dimensions": self._config.embedding_dimensions,
        }

"""
Embedding-based sentiment heuristic.

Folds the leading dimensions of a sentence embedding into a polarity score
with fixed alternating weights (+1 for even indices, -1 for odd). This is an
untrained transform, not a learned classifier; it is kept as a pure function
so any embedding source can be substituted.
"""

import math
from collections.abc import Sequence

import numpy as np
import structlog

from src.embedding.service import TextEmbedder
from src.observability.metrics import get_metrics
from src.sentiment.lexicon import classify_lexicon
from src.sentiment.schemas import SentimentLabel, SentimentResult

logger = structlog.get_logger(__name__)

MAX_DIMENSIONS = 100
NEUTRAL_BAND = 0.2


def score_embedding(vector: Sequence[float], max_dimensions: int = MAX_DIMENSIONS) -> float:
    """
    Reduce an embedding to a polarity score in [-1, 1].

    Raises:
        ValueError: if the vector is empty or the score is not finite
    """
    values = np.asarray(vector, dtype=np.float64).ravel()[:max_dimensions]
    if values.size == 0:
        raise ValueError("Embedding vector is empty")

    weights = np.where(np.arange(values.size) % 2 == 0, 1.0, -1.0)
    score = float(np.dot(values, weights)) / values.size
    if not math.isfinite(score):
        raise ValueError(f"Embedding score is not finite: {score}")

    return max(-1.0, min(1.0, score))


def classify_embedding_score(score: float, neutral_band: float = NEUTRAL_BAND) -> SentimentResult:
    """Map an embedding polarity score to a labelled result."""
    label: SentimentLabel
    if abs(score) < neutral_band:
        label = "neutral"
        confidence = 1 - abs(score) * 2
    elif score > 0:
        label = "positive"
        confidence = score
    else:
        label = "negative"
        confidence = abs(score)

    return SentimentResult(
        sentiment=label,
        confidence=max(0.0, min(1.0, confidence)),
        score=score,
    )


async def classify_with_model(
    text: str,
    model: TextEmbedder | None,
    max_dimensions: int = MAX_DIMENSIONS,
    neutral_band: float = NEUTRAL_BAND,
    lexicon_neutral_band: float | None = None,
) -> SentimentResult:
    """
    Classify text with the embedding heuristic, falling back to the lexicon.

    The model is borrowed for this call only. Any failure while embedding or
    scoring is logged and answered with the lexicon result for the same text;
    it does not affect the model's lifecycle status.

    Args:
        text: Text to classify
        model: Loaded embedder, or None to use the lexicon directly
        max_dimensions: Leading dimensions used for the score
        neutral_band: Embedding-tier neutral band
        lexicon_neutral_band: Neutral band for the lexicon fallback

    Returns:
        SentimentResult from the embedding tier, or from the lexicon tier
    """
    lexicon_kwargs = {} if lexicon_neutral_band is None else {"neutral_band": lexicon_neutral_band}

    if model is None or not text.strip():
        return classify_lexicon(text, **lexicon_kwargs)

    try:
        batch = await model.embed([text])
        with batch:
            score = score_embedding(batch.array()[0], max_dimensions)
    except Exception as e:
        logger.warning(
            "Embedding sentiment failed, using lexicon fallback",
            error=str(e),
            error_type=type(e).__name__,
        )
        get_metrics().record_sentiment_fallback("inference_error")
        return classify_lexicon(text, **lexicon_kwargs)

    return classify_embedding_score(score, neutral_band)

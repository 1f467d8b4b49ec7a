"""
Live sentiment analysis pipeline.

Classifies free text as positive / negative / neutral as the user types:
- Lexicon heuristic (always available)
- Embedding heuristic over a sentence-transformer model (when loaded)
- Debounced, generation-tagged scheduling so only the latest text's
  result is ever applied
- Result store feeding a presentation-layer callback

Usage:
    from src.sentiment import SentimentWidget

    async with SentimentWidget(on_sentiment_detected=print) as widget:
        widget.enable()
        widget.set_text("this is awesome")
        await widget.wait_until_idle()
"""

from src.sentiment.config import SentimentConfig
from src.sentiment.embedding_classifier import (
    classify_embedding_score,
    classify_with_model,
    score_embedding,
)
from src.sentiment.lexicon import NEGATIVE_WORDS, POSITIVE_WORDS, classify_lexicon
from src.sentiment.scheduler import AnalysisScheduler, SchedulerState
from src.sentiment.schemas import AnalysisRequest, SentimentResult, WidgetSettings
from src.sentiment.service import SentimentService
from src.sentiment.store import ResultStore
from src.sentiment.widget import SentimentWidget

__all__ = [
    # Schemas
    "AnalysisRequest",
    "SentimentResult",
    "WidgetSettings",
    "SentimentConfig",
    # Classifiers
    "POSITIVE_WORDS",
    "NEGATIVE_WORDS",
    "classify_lexicon",
    "classify_embedding_score",
    "classify_with_model",
    "score_embedding",
    "SentimentService",
    # Scheduling
    "AnalysisScheduler",
    "SchedulerState",
    "ResultStore",
    "SentimentWidget",
]

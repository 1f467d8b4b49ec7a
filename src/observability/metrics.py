"""
Prometheus metrics for the sentiment analysis pipeline.

Defines and exposes metrics for:
- Analyses by classifier tier and label
- Confidence distribution and analysis latency
- Fallbacks from the embedding tier to the lexicon tier
- Superseded (discarded) versus applied analyses
- Model load outcomes and readiness

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

# Model loads download weights on first use, so the range is much wider
LOAD_LATENCY_BUCKETS = (0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)

CONFIDENCE_BUCKETS = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the live-sentiment pipeline.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_sentiment_analyzed("lexicon", "positive", 0.375)
        metrics.record_analysis_superseded("superseded")
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        # Classification
        self.sentiment_analyzed = Counter(
            "live_sentiment_analyzed_total",
            "Total number of texts classified",
            ["tier", "label"],  # tier: lexicon, embedding
        )

        self.sentiment_confidence = Histogram(
            "live_sentiment_confidence",
            "Distribution of classification confidence",
            ["label"],
            buckets=CONFIDENCE_BUCKETS,
        )

        self.sentiment_latency = Histogram(
            "live_sentiment_latency_seconds",
            "Time to classify a single text",
            ["tier"],
            buckets=LATENCY_BUCKETS,
        )

        self.sentiment_fallbacks = Counter(
            "live_sentiment_fallbacks_total",
            "Embedding-tier calls answered by the lexicon tier",
            ["reason"],  # inference_error
        )

        # Scheduling
        self.analyses_applied = Counter(
            "live_sentiment_analyses_applied_total",
            "Analyses whose result reached the result store",
        )

        self.analyses_superseded = Counter(
            "live_sentiment_analyses_superseded_total",
            "Analyses discarded before reaching the result store",
            ["reason"],  # superseded, session_closed
        )

        # Model lifecycle
        self.model_loads = Counter(
            "live_sentiment_model_loads_total",
            "Embedding model load attempts by outcome",
            ["status"],  # ready, error, discarded
        )

        self.model_load_latency = Histogram(
            "live_sentiment_model_load_latency_seconds",
            "Time to load the embedding model",
            buckets=LOAD_LATENCY_BUCKETS,
        )

        self.model_ready = Gauge(
            "live_sentiment_model_ready",
            "Embedding model readiness (1=ready, 0=not ready)",
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_sentiment_analyzed(
        self,
        tier: str,
        label: str,
        confidence: float | None = None,
    ) -> None:
        """
        Record a completed classification.

        Args:
            tier: Classifier tier that was selected (lexicon, embedding)
            label: Sentiment label (positive, negative, neutral)
            confidence: Optional confidence score to record
        """
        self.sentiment_analyzed.labels(tier=tier, label=label).inc()

        if confidence is not None:
            self.sentiment_confidence.labels(label=label).observe(confidence)

    def record_sentiment_latency(self, tier: str, latency: float) -> None:
        """Record classification latency in seconds."""
        self.sentiment_latency.labels(tier=tier).observe(latency)

    def record_sentiment_fallback(self, reason: str) -> None:
        """Record an embedding-tier call that fell back to the lexicon tier."""
        self.sentiment_fallbacks.labels(reason=reason).inc()

    def record_analysis_applied(self) -> None:
        """Record an analysis result written to the result store."""
        self.analyses_applied.inc()

    def record_analysis_superseded(self, reason: str) -> None:
        """
        Record an analysis result that was dropped.

        Args:
            reason: superseded (a newer request exists) or session_closed
        """
        self.analyses_superseded.labels(reason=reason).inc()

    def record_model_load(self, status: str, latency: float | None = None) -> None:
        """
        Record the outcome of a model load attempt.

        Args:
            status: ready, error or discarded (session ended mid-load)
            latency: Load duration in seconds
        """
        self.model_loads.labels(status=status).inc()
        if latency is not None:
            self.model_load_latency.observe(latency)

    def set_model_ready(self, ready: bool) -> None:
        """Set the model readiness gauge."""
        self.model_ready.set(1 if ready else 0)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics

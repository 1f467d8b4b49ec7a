"""
Result store: the single source of truth read by the presentation layer.

Holds the latest applied SentimentResult, the user settings and the
loading/error flags derived from the model status. Only the analysis
scheduler writes results, and only in increasing generation order.
"""

from collections.abc import Callable
from typing import Any

import structlog

from src.embedding.lifecycle import ModelStatus
from src.observability.metrics import get_metrics
from src.sentiment.schemas import SentimentResult, WidgetSettings

logger = structlog.get_logger(__name__)

SentimentCallback = Callable[[SentimentResult], None]


class ResultStore:
    """Latest result, settings and model flags for one widget."""

    def __init__(
        self,
        on_sentiment_detected: SentimentCallback | None = None,
        settings: WidgetSettings | None = None,
    ):
        self._callback = on_sentiment_detected
        self._settings = settings or WidgetSettings()
        self._result: SentimentResult | None = None
        self._applied_generation = 0
        self._is_loading = False
        self._error: str | None = None

    @property
    def result(self) -> SentimentResult | None:
        return self._result

    @property
    def settings(self) -> WidgetSettings:
        return self._settings

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def applied_generation(self) -> int:
        """Generation of the most recently applied result (0 if none)."""
        return self._applied_generation

    def apply(self, generation: int, result: SentimentResult) -> bool:
        """
        Replace the current result and notify the callback.

        Results must arrive in increasing generation order; anything at or
        below the last applied generation is rejected.

        Returns:
            True if the result was applied
        """
        if generation <= self._applied_generation:
            logger.debug(
                "Rejected out-of-order result",
                generation=generation,
                applied_generation=self._applied_generation,
            )
            return False

        self._result = result
        self._applied_generation = generation
        get_metrics().record_analysis_applied()

        if self._callback is not None:
            try:
                self._callback(result)
            except Exception:
                logger.exception("on_sentiment_detected callback failed", generation=generation)

        return True

    def reset_generation(self) -> None:
        """Start generation ordering afresh for a new analysis session."""
        self._applied_generation = 0

    def update_settings(self, **changes: Any) -> WidgetSettings:
        """
        Validate and replace settings.

        Raises:
            pydantic.ValidationError: if a value is out of range or a key
                is unknown; the previous settings are kept
        """
        self._settings = WidgetSettings.model_validate(
            {**self._settings.model_dump(), **changes}
        )
        return self._settings

    def sync_model_status(self, status: ModelStatus, error: str | None = None) -> None:
        """Derive the loading/error flags from the model status."""
        self._is_loading = status == ModelStatus.LOADING
        self._error = error if status == ModelStatus.ERROR else None

    def clear(self) -> None:
        """Drop the stored result (widget teardown)."""
        self._result = None
        self._applied_generation = 0

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view for the presentation layer."""
        return {
            "result": self._result.to_dict() if self._result else None,
            "settings": self._settings.model_dump(),
            "is_loading": self._is_loading,
            "error": self._error,
        }

"""
Sentiment widget facade.

Connects the inputs of a presentation layer (enabled flag, text, settings)
to the analysis pipeline and exposes its outputs (latest result,
``is_loading``, ``error`` and the ``on_sentiment_detected`` callback).

Usage:
    async with SentimentWidget(on_sentiment_detected=print) as widget:
        widget.enable()
        widget.set_text("I love this")
        await widget.wait_until_idle()
        print(widget.result)
"""

import uuid
from types import TracebackType
from typing import Any

import structlog

from src.embedding.lifecycle import ModelLifecycleManager, ModelLoader, ModelStatus
from src.observability.logging import bind_context, unbind_context
from src.sentiment.config import SentimentConfig
from src.sentiment.scheduler import AnalysisScheduler
from src.sentiment.schemas import SentimentResult, WidgetSettings
from src.sentiment.service import SentimentService
from src.sentiment.store import ResultStore, SentimentCallback

logger = structlog.get_logger(__name__)


class SentimentWidget:
    """
    One interactive sentiment analysis widget.

    Enabling starts a session: a fresh AnalysisScheduler and a model load.
    Disabling ends it: the scheduler is closed (timer cleared, in-flight
    results suppressed) and the model is released.
    """

    def __init__(
        self,
        on_sentiment_detected: SentimentCallback | None = None,
        settings: WidgetSettings | None = None,
        config: SentimentConfig | None = None,
        model_manager: ModelLifecycleManager | None = None,
        loader: ModelLoader | None = None,
        load_model: bool = True,
    ):
        """
        Args:
            on_sentiment_detected: Called once per applied analysis
            settings: Initial user settings
            config: Scheduling and classifier configuration
            model_manager: Lifecycle manager to use (built from ``loader``
                if None)
            loader: Async model loader for the default lifecycle manager
            load_model: If False the model is never loaded and every
                analysis uses the lexicon tier
        """
        self._config = config or SentimentConfig()
        self._load_model = load_model
        self._store = ResultStore(on_sentiment_detected, settings)
        self._models = model_manager or ModelLifecycleManager(loader=loader)
        self._models.add_listener(self._on_model_status)
        self._service = SentimentService(self._models, self._config)

        self._scheduler: AnalysisScheduler | None = None
        self._session_id: str | None = None
        self._text = ""

    # Outputs

    @property
    def result(self) -> SentimentResult | None:
        return self._store.result

    @property
    def settings(self) -> WidgetSettings:
        return self._store.settings

    @property
    def is_loading(self) -> bool:
        return self._store.is_loading

    @property
    def error(self) -> str | None:
        return self._store.error

    @property
    def model_status(self) -> ModelStatus:
        return self._models.status

    @property
    def enabled(self) -> bool:
        return self._scheduler is not None

    @property
    def text(self) -> str:
        return self._text

    @property
    def store(self) -> ResultStore:
        return self._store

    @property
    def scheduler(self) -> AnalysisScheduler | None:
        return self._scheduler

    @property
    def service(self) -> SentimentService:
        return self._service

    # Inputs

    def set_enabled(self, enabled: bool) -> None:
        if enabled:
            self.enable()
        else:
            self.disable()

    def enable(self) -> None:
        """Start a session: new scheduler, model load, analyse current text."""
        if self._scheduler is not None:
            return

        self._session_id = uuid.uuid4().hex[:12]
        bind_context(session_id=self._session_id)
        logger.info("Sentiment widget enabled", real_time=self._store.settings.real_time)

        self._store.reset_generation()
        self._scheduler = AnalysisScheduler(self._service.analyze, self._store, self._config)
        if self._load_model:
            self._models.enable()
        self._scheduler.submit(self._text)

    def disable(self) -> None:
        """End the session. Idempotent."""
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None:
            scheduler.close()

        self._models.disable()

        if self._session_id is not None:
            logger.info("Sentiment widget disabled")
            unbind_context("session_id")
            self._session_id = None

    def set_text(self, text: str) -> None:
        """Register a new text snapshot."""
        self._text = text
        if self._scheduler is not None:
            self._scheduler.submit(text)

    def update_settings(self, **changes: Any) -> WidgetSettings:
        """
        Update user settings. Toggling ``real_time`` re-analyses the
        current text; other settings never trigger analysis.

        Raises:
            pydantic.ValidationError: on out-of-range values or unknown keys
        """
        previous = self._store.settings
        settings = self._store.update_settings(**changes)
        if settings.real_time != previous.real_time and self._scheduler is not None:
            self._scheduler.refresh()
        return settings

    def _on_model_status(self, status: ModelStatus) -> None:
        self._store.sync_model_status(status, self._models.error)
        if status == ModelStatus.READY and self._scheduler is not None:
            # Upgrade the current result to the embedding tier
            self._scheduler.refresh()

    # Lifecycle

    async def wait_until_idle(self) -> None:
        """
        Wait for the model load and for every scheduled analysis to finish,
        including one still waiting on its debounce timer.
        """
        await self._models.wait_until_settled()
        if self._scheduler is not None:
            await self._scheduler.wait_until_idle()

    async def close(self) -> None:
        """Unmount: end the session, release everything, drop the result."""
        self.disable()
        await self._models.close()
        self._store.clear()

    async def __aenter__(self) -> "SentimentWidget":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

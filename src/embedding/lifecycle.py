"""
Embedding model lifecycle management.

Owns the optional loaded embedding model for one widget and exposes its
status: UNLOADED → LOADING → READY | ERROR, reset to UNLOADED on disable.

Each enable() starts a lifecycle session identified by a token. A load that
finishes after its session was disabled sees a stale token and disposes of
its model instead of publishing it.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial

import structlog

from src.embedding.config import EmbeddingConfig
from src.embedding.service import TextEmbedder, load_embedder
from src.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load sentiment analysis model"

ModelLoader = Callable[[], Awaitable[TextEmbedder]]
StatusListener = Callable[["ModelStatus"], None]


class ModelStatus(str, Enum):
    """Embedding model status."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ModelLifecycleManager:
    """
    Loads, holds and releases the embedding model.

    Load failures are non-fatal: status becomes ERROR and callers keep
    classifying with the lexicon tier.

    Usage:
        manager = ModelLifecycleManager()
        manager.enable()                      # starts async load
        status = await manager.wait_until_settled()
        if manager.model is not None:
            ...
        manager.disable()                     # releases immediately
    """

    def __init__(
        self,
        loader: ModelLoader | None = None,
        config: EmbeddingConfig | None = None,
    ):
        """
        Args:
            loader: Async zero-argument callable returning a TextEmbedder
                (defaults to loading ``config.model_name`` with transformers)
            config: Embedding configuration for the default loader
        """
        self._config = config or EmbeddingConfig()
        self._loader: ModelLoader = loader or partial(load_embedder, self._config)

        self._status = ModelStatus.UNLOADED
        self._model: TextEmbedder | None = None
        self._error: str | None = None

        self._session = 0
        self._load_task: asyncio.Task | None = None
        self._pending_loads: set[asyncio.Task] = set()
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> ModelStatus:
        return self._status

    @property
    def model(self) -> TextEmbedder | None:
        """The loaded model, only while status is READY."""
        return self._model

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._status == ModelStatus.LOADING

    @property
    def session(self) -> int:
        """Token of the current (or last) lifecycle session."""
        return self._session

    def add_listener(self, listener: StatusListener) -> None:
        """Register a callback invoked synchronously on every status change."""
        self._listeners.append(listener)

    def _set_status(self, status: ModelStatus) -> None:
        if status == self._status:
            return
        previous, self._status = self._status, status
        logger.debug("Model status changed", previous=previous.value, status=status.value)
        get_metrics().set_model_ready(status == ModelStatus.READY)
        for listener in list(self._listeners):
            listener(status)

    def enable(self) -> asyncio.Task | None:
        """
        Start loading the model for a new session.

        No-op while a session is active (loading, ready or error); the
        current load task is returned in that case.
        """
        if self._status != ModelStatus.UNLOADED:
            return self._load_task

        self._session += 1
        self._error = None
        self._set_status(ModelStatus.LOADING)

        task = asyncio.create_task(
            self._load(self._session),
            name=f"embedding-model-load-{self._session}",
        )
        self._load_task = task
        self._pending_loads.add(task)
        task.add_done_callback(self._pending_loads.discard)
        return task

    async def _load(self, session: int) -> None:
        metrics = get_metrics()
        start_time = time.perf_counter()

        try:
            model = await self._loader()
        except Exception as e:
            latency = time.perf_counter() - start_time
            if session != self._session:
                logger.info("Ignoring model load failure for closed session", session=session)
                metrics.record_model_load("discarded", latency)
                return
            self._error = LOAD_ERROR_MESSAGE
            self._set_status(ModelStatus.ERROR)
            metrics.record_model_load("error", latency)
            logger.error(
                LOAD_ERROR_MESSAGE,
                session=session,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        latency = time.perf_counter() - start_time

        if session != self._session:
            logger.info("Discarding model loaded for closed session", session=session)
            metrics.record_model_load("discarded", latency)
            self._release(model)
            return

        self._model = model
        self._set_status(ModelStatus.READY)
        metrics.record_model_load("ready", latency)
        logger.info(
            "Sentiment embedding model ready",
            session=session,
            load_time_ms=round(latency * 1000, 2),
        )

    def disable(self) -> None:
        """
        End the current session. Idempotent.

        Releases the held model immediately and resets status to UNLOADED.
        An in-flight load is not interrupted; its result is discarded when
        it arrives.
        """
        self._session += 1
        self._load_task = None
        self._error = None

        model, self._model = self._model, None
        if model is not None:
            self._release(model)

        self._set_status(ModelStatus.UNLOADED)

    def _release(self, model: TextEmbedder) -> None:
        try:
            model.dispose()
        except Exception as e:
            logger.warning("Model dispose failed", error=str(e))

    async def wait_until_settled(self) -> ModelStatus:
        """Wait for the current load (if any) to finish and return the status."""
        task = self._load_task
        if task is not None:
            await asyncio.shield(task)
        return self._status

    async def close(self) -> None:
        """Disable and wait for orphaned loads so their models get released."""
        self.disable()
        if self._pending_loads:
            await asyncio.gather(*self._pending_loads, return_exceptions=True)

    def get_stats(self) -> dict[str, object]:
        """Get lifecycle statistics."""
        return {
            "status": self._status.value,
            "session": self._session,
            "error": self._error,
            "pending_loads": len(self._pending_loads),
        }

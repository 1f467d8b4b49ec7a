"""
Debounced, race-safe scheduling of sentiment analyses.

One AnalysisScheduler exists per enabled widget session:

    idle --submit--> debouncing --timer--> in_flight --apply--> idle
                       |  ^
                       +--+ submit (timer restarts)

Every submit() bumps the generation. A completed analysis is written to the
result store only if the session is still live and its generation is still
the current one; anything else is dropped. In-flight work is never
interrupted, only its effect is suppressed.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

import structlog

from src.observability.metrics import get_metrics
from src.sentiment.config import SentimentConfig
from src.sentiment.schemas import AnalysisRequest, SentimentResult
from src.sentiment.store import ResultStore

logger = structlog.get_logger(__name__)

Analyzer = Callable[[str], Awaitable[SentimentResult]]


class SchedulerState(str, Enum):
    """Observable scheduler state."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"


class AnalysisScheduler:
    """
    Decide when to analyse text and whether the result may be applied.

    Must be created and used from inside a running event loop.

    Usage:
        scheduler = AnalysisScheduler(service.analyze, store)
        scheduler.submit("I love this")   # debounced in real-time mode
        ...
        scheduler.close()                 # single teardown path
    """

    def __init__(
        self,
        analyze: Analyzer,
        store: ResultStore,
        config: SentimentConfig | None = None,
    ):
        self._analyze = analyze
        self._store = store
        self._config = config or SentimentConfig()

        self._text = ""
        self._generation = 0
        self._live = True
        self._timer: asyncio.TimerHandle | None = None
        self._timer_settled = asyncio.Event()
        self._timer_settled.set()
        self._in_flight: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    @property
    def text(self) -> str:
        return self._text

    @property
    def state(self) -> SchedulerState:
        if self._timer is not None:
            return SchedulerState.DEBOUNCING
        if self._in_flight:
            return SchedulerState.IN_FLIGHT
        return SchedulerState.IDLE

    def submit(self, text: str) -> int | None:
        """
        Register a text change.

        Cancels any pending timer and supersedes in-flight work. Blank text
        is recorded but not analysed.

        Returns:
            The generation scheduled for analysis, or None if nothing was
            scheduled
        """
        self._text = text
        if not self._live:
            return None

        self._cancel_timer()
        self._generation += 1

        if not text.strip():
            return None

        generation = self._generation
        if self._store.settings.real_time:
            loop = asyncio.get_running_loop()
            self._timer_settled.clear()
            self._timer = loop.call_later(
                self._config.debounce_seconds,
                self._on_timer,
                AnalysisRequest(generation=generation, text=text),
            )
        else:
            self._dispatch(AnalysisRequest(generation=generation, text=text))

        return generation

    def refresh(self) -> int | None:
        """Re-analyse the current text (model became ready, mode changed)."""
        return self.submit(self._text)

    def _on_timer(self, request: AnalysisRequest) -> None:
        self._timer = None
        self._timer_settled.set()
        if not self._live or request.generation != self._generation:
            return
        self._dispatch(request)

    def _dispatch(self, request: AnalysisRequest) -> None:
        task = asyncio.create_task(
            self._run(request),
            name=f"sentiment-analysis-{request.generation}",
        )
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run(self, request: AnalysisRequest) -> None:
        try:
            result = await self._analyze(request.text)
        except Exception:
            logger.exception("Sentiment analysis failed", generation=request.generation)
            return

        metrics = get_metrics()
        if not self._live:
            metrics.record_analysis_superseded("session_closed")
            logger.debug("Dropped result for closed session", generation=request.generation)
            return
        if request.generation != self._generation:
            metrics.record_analysis_superseded("superseded")
            logger.debug(
                "Dropped superseded result",
                generation=request.generation,
                current_generation=self._generation,
            )
            return

        self._store.apply(request.generation, result)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._timer_settled.set()

    async def drain(self) -> None:
        """Wait until no analysis is in flight (pending timers are not awaited)."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def wait_until_idle(self) -> None:
        """Wait for the pending debounce timer (if any) and then for in-flight work."""
        while self.state != SchedulerState.IDLE:
            await self._timer_settled.wait()
            await self.drain()

    def close(self) -> None:
        """
        Tear down the session: stop accepting work, clear the timer and
        invalidate in-flight analyses. Idempotent.
        """
        if not self._live:
            return
        self._live = False
        self._cancel_timer()
        self._generation += 1
        logger.debug("Analysis session closed", in_flight=len(self._in_flight))

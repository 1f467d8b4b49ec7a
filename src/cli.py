"""
Command-line interface for live-sentiment.

Drives the sentiment widget from a terminal: one-shot classification of a
single text, or a watch loop that treats every stdin line as the next
snapshot of the text being typed.

Usage:
    live-sentiment analyze "I love this"      # One-shot classification
    live-sentiment analyze --lexicon-only ... # Skip the embedding model
    live-sentiment watch < notes.txt          # Feed text changes from stdin
"""

import asyncio
import codecs
import json
import os
import signal
import sys
import threading
from collections.abc import Iterator

import click

from src.config.settings import get_settings
from src.observability.logging import setup_logging
from src.observability.metrics import get_metrics
from src.sentiment.config import SentimentConfig
from src.sentiment.schemas import SentimentResult, WidgetSettings

SENTIMENT_COLORS = {"positive": "green", "negative": "red", "neutral": "yellow"}


def _format_result(result: SentimentResult, show_confidence: bool = True) -> str:
    line = click.style(f"{result.sentiment:<8}", fg=SENTIMENT_COLORS[result.sentiment])
    if show_confidence:
        line += f"  confidence={result.confidence * 100:.1f}%"
    return line + f"  score={result.score:.3f}"


def _iter_stdin_lines() -> Iterator[str]:
    """
    Yield stdin lines, reading the file descriptor directly when there is one.

    ``os.read`` takes no lock on ``sys.stdin``, so a reader thread left
    blocked on an idle terminal cannot stall interpreter shutdown.
    """
    try:
        fd = sys.stdin.fileno()
    except (OSError, ValueError):
        # In-memory stdin (e.g. click's CliRunner) never blocks
        yield from iter(sys.stdin.readline, "")
        return

    decoder = codecs.getincrementaldecoder(sys.stdin.encoding or "utf-8")(errors="replace")
    pending = ""
    while True:
        chunk = os.read(fd, 4096)
        pending += decoder.decode(chunk, final=not chunk)
        *complete, pending = pending.split("\n")
        for line in complete:
            yield line + "\n"
        if not chunk:
            break
    if pending:
        yield pending


def _pump_stdin(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue) -> None:
    """Forward stdin lines to ``lines`` from a daemon thread; None marks EOF."""
    try:
        for line in _iter_stdin_lines():
            loop.call_soon_threadsafe(lines.put_nowait, line)
        loop.call_soon_threadsafe(lines.put_nowait, None)
    except RuntimeError:
        # Event loop already closed after a stop signal
        return


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Live Sentiment - classify text as you type."""
    setup_logging(level="DEBUG" if debug else None)


@main.command()
@click.argument("text")
@click.option("--lexicon-only", is_flag=True, help="Do not load the embedding model")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def analyze(text: str, lexicon_only: bool, as_json: bool) -> None:
    """Classify a single TEXT."""
    from src.embedding.lifecycle import ModelLifecycleManager
    from src.sentiment.service import SentimentService

    async def run() -> tuple[SentimentResult, str]:
        models = ModelLifecycleManager()
        service = SentimentService(models, SentimentConfig())
        if not lexicon_only:
            models.enable()
        status = await models.wait_until_settled()
        try:
            return await service.analyze(text), status.value
        finally:
            await models.close()

    result, model_status = asyncio.run(run())

    if as_json:
        click.echo(json.dumps({**result.to_dict(), "model_status": model_status}))
        return

    click.echo(_format_result(result))
    if model_status != "ready" and not lexicon_only:
        click.echo(click.style("(embedding model unavailable, lexicon result)", fg="yellow"), err=True)


@main.command()
@click.option("--lexicon-only", is_flag=True, help="Do not load the embedding model")
@click.option("--real-time/--no-real-time", default=True, help="Debounce text changes")
@click.option("--debounce", type=float, default=None, help="Debounce window in seconds")
@click.option("--hide-confidence", is_flag=True, help="Do not print confidence")
@click.option("--metrics/--no-metrics", default=None, help="Enable metrics server")
def watch(
    lexicon_only: bool,
    real_time: bool,
    debounce: float | None,
    hide_confidence: bool,
    metrics: bool | None,
) -> None:
    """Read text snapshots from stdin and print each applied result."""
    from src.sentiment.widget import SentimentWidget

    settings = get_settings()
    config = SentimentConfig() if debounce is None else SentimentConfig(debounce_seconds=debounce)
    widget_settings = WidgetSettings(real_time=real_time, show_confidence=not hide_confidence)

    def on_result(result: SentimentResult) -> None:
        click.echo(_format_result(result, widget_settings.show_confidence))

    async def run() -> None:
        if metrics or (metrics is None and settings.metrics_enabled):
            get_metrics().start_server()

        async with SentimentWidget(
            on_sentiment_detected=on_result,
            settings=widget_settings,
            config=config,
            load_model=not lexicon_only,
        ) as widget:
            stop = asyncio.Event()
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, stop.set)

            lines: asyncio.Queue = asyncio.Queue()
            reader = threading.Thread(
                target=_pump_stdin, args=(loop, lines), name="stdin-reader", daemon=True
            )
            reader.start()

            widget.enable()
            stop_task = asyncio.create_task(stop.wait())
            try:
                while True:
                    next_line = asyncio.create_task(lines.get())
                    done, _ = await asyncio.wait(
                        {next_line, stop_task}, return_when=asyncio.FIRST_COMPLETED
                    )
                    if next_line not in done:
                        next_line.cancel()
                        break
                    line = next_line.result()
                    if line is None:
                        break
                    widget.set_text(line.rstrip("\n"))
            finally:
                stop_task.cancel()

            if stop.is_set():
                click.echo(click.style("Stopped", fg="yellow"), err=True)
                return

            await widget.wait_until_idle()
            if widget.error:
                click.echo(click.style(widget.error, fg="yellow"), err=True)

    asyncio.run(run())


if __name__ == "__main__":
    main()

"""
Structured logging configuration using structlog.

JSON lines in production, coloured console output during development.
Session-scoped fields (e.g. ``session_id``) are carried through
contextvars so every log line emitted while a widget session is enabled
can be correlated.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from src.config.settings import Settings, get_settings


def setup_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        settings: Settings to read environment and level from (cached
            settings if None)
        level: Explicit level name overriding ``settings.log_level``
    """
    settings = settings or get_settings()
    level_name = (level or settings.log_level).upper()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so CLI results on stdout stay machine-readable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
    )

    # Model hub and tensor libraries are chatty at INFO
    for noisy in ("transformers", "torch", "urllib3", "filelock", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """
    Bind context variables to all subsequent log messages.

    Args:
        **kwargs: Key-value pairs to bind (e.g. ``session_id="ab12"``)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys previously bound with ``bind_context``."""
    structlog.contextvars.unbind_contextvars(*keys)

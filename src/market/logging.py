"""Structured logging configuration using structlog with async context propagation."""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Configure structlog with JSON or console rendering.

    Uses structlog.contextvars so the symbol bound by ``snapshot_context``
    follows every event emitted while a snapshot is computed, including
    work fanned out with asyncio.gather / asyncio.to_thread.

    Args:
        log_level: Root log level name (e.g. "DEBUG", "INFO").
        log_format: "json" (machine-readable) or "console" (human-readable).
            Falls back to the LOG_FORMAT environment variable, then "console".
    """
    fmt = (log_format or os.environ.get("LOG_FORMAT", "console")).lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if fmt == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)


@contextmanager
def snapshot_context(symbol: str) -> Iterator[None]:
    """Bind ``symbol`` to every log event emitted inside the block."""
    with structlog.contextvars.bound_contextvars(symbol=symbol):
        yield

"""Structured logging configuration using structlog."""

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    # sys.stderr is looked up per logger so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure structured logging for the pipeline.

    Events go to stderr so that report output on stdout stays clean.

    Args:
        level: One of ``LOG_LEVELS`` (case-insensitive); unknown names
            fall back to INFO.
        json_output: Emit one JSON object per event instead of the
            human-readable console format.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # pandas/pandera warnings routed through the stdlib logger
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind key/value pairs to every event logged inside the block.

    Example:
        with log_context(project="salary", source="Salary_Data.csv"):
            log.info("Cleaning")  # carries project and source
    """
    return structlog.contextvars.bound_contextvars(**kwargs)


@contextmanager
def log_stage(stage: str, **fields: Any) -> Iterator[None]:
    """
    Log the start and end of one pipeline stage with its duration.

    The stage name is bound to every event logged inside the block. A
    failing stage logs ``stage failed`` and re-raises.
    """
    log = get_logger("salarystats.stage")
    start = time.perf_counter()
    with structlog.contextvars.bound_contextvars(stage=stage):
        log.info("stage started", **fields)
        try:
            yield
        except Exception:
            log.error("stage failed", elapsed_ms=_elapsed_ms(start))
            raise
        log.info("stage finished", elapsed_ms=_elapsed_ms(start))


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)

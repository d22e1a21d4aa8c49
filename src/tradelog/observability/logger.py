"""Structured logging with run_id support.

Uses structlog on top of the stdlib ``logging`` tree: calculation
modules log through ``logging.getLogger(__name__)`` and structlog
renders everything (JSON in production, console in development).
Every entry carries the ``run_id`` of the analytics run that produced
it, so the warnings of one report can be grouped downstream.
"""

from __future__ import annotations

import contextlib
import logging
import sys
import uuid
from collections.abc import Iterator
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from tradelog.core.config import ObservabilityConfig

_run_id: ContextVar[str] = ContextVar("run_id", default="")


def get_run_id() -> str:
    """Current run ID, creating one if none is set."""
    rid = _run_id.get()
    if not rid:
        rid = new_run_id()
    return rid


def set_run_id(run_id: str) -> None:
    _run_id.set(run_id)


def new_run_id() -> str:
    """Generate and set a new run ID."""
    rid = uuid.uuid4().hex[:12]
    _run_id.set(rid)
    return rid


@contextlib.contextmanager
def run_context(run_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Scope a run ID (and extra context fields) to a block.

    Restores the previous run ID on exit so nested reports do not leak
    their context into the caller.
    """
    token = _run_id.set(run_id or uuid.uuid4().hex[:12])
    with structlog.contextvars.bound_contextvars(**fields):
        try:
            yield _run_id.get()
        finally:
            _run_id.reset(token)


def _add_run_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: stamp run_id on every entry."""
    event_dict.setdefault("run_id", get_run_id())
    return event_dict


def setup_logging(level: str = "INFO", format: str = "json") -> None:
    """Configure structured logging for the engine and its host.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_run_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route plain stdlib records (calculation modules) through the same
    # renderer so both kinds of entries look alike.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def setup_logging_from_config(config: ObservabilityConfig) -> None:
    setup_logging(level=config.log_level, format=config.log_format)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)

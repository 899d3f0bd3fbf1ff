"""Structured logging for breezybridge.

The bridge logs through structlog; Breezy logs through the stdlib ``brz``
logger. :func:`configure_logging` sends both through one stdlib handler so
that a host application sees a single stream, rendered as JSON when
``BREEZYBRIDGE_LOG_FORMAT=json`` and as coloured console lines otherwise.

Usage:
    from breezybridge.logging import configure_logging, get_logger, log_context

    configure_logging()

    log = get_logger(__name__)
    with log_context(location="/srv/repos/project"):
        log.info("probe_started")
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "RUNTIME_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "log_context",
]

LOG_FORMAT_ENV_VAR = "BREEZYBRIDGE_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "BREEZYBRIDGE_LOG_LEVEL"
RUNTIME_LOG_LEVEL_ENV_VAR = "BREEZYBRIDGE_RUNTIME_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "INFO"

#: Breezy chatters at INFO about every transport it opens
DEFAULT_RUNTIME_LOG_LEVEL = "WARNING"

#: Name of the stdlib logger the runtime writes to
RUNTIME_LOGGER_NAME = "brz"


def _level_from_env(var: str, default: str) -> int:
    level_name = os.environ.get(var, default).upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.getLevelName(default)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _pre_chain() -> list[Processor]:
    """Processors applied to bridge and runtime records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(use_json: bool) -> list[Processor]:
    if use_json:
        return [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
    runtime_level: int | None = None,
) -> None:
    """Configure structlog and the stdlib root handler for the host process.

    breezybridge never calls this itself; the embedding application decides
    when (and whether) logging is configured. Calling it again replaces the
    previous configuration.

    Args:
        force_json: Force JSON output regardless of BREEZYBRIDGE_LOG_FORMAT.
        level: Level for bridge records. Read from BREEZYBRIDGE_LOG_LEVEL
            when None.
        runtime_level: Level for the runtime's own ``brz`` logger. Read from
            BREEZYBRIDGE_RUNTIME_LOG_LEVEL when None.

    Example:
        configure_logging(level=logging.DEBUG, runtime_level=logging.INFO)
    """
    use_json = force_json or _is_json_output()
    if level is None:
        level = _level_from_env(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    if runtime_level is None:
        runtime_level = _level_from_env(
            RUNTIME_LOG_LEVEL_ENV_VAR, DEFAULT_RUNTIME_LOG_LEVEL
        )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer(use_json),
            ],
            foreign_pre_chain=_pre_chain(),
        )
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger(RUNTIME_LOGGER_NAME).setLevel(runtime_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Example:
        log = get_logger(__name__)
        log.debug("handle_released", type_name="Branch")
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Add *context* to every record logged in this block, on this thread.

    Keys bound by the caller before the block are restored on exit, so
    nested scopes (a probe inside a host's request scope) compose.
    """
    with structlog.contextvars.bound_contextvars(**context):
        yield

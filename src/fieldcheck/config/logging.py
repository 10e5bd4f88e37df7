"""structlog configuration for fieldcheck.

The library itself only logs through stdlib ``logging.getLogger(__name__)``.
Host applications that want readable output call :func:`configure_logging`,
which renders those records (and any structlog loggers) through a single
``ProcessorFormatter`` handler on the ``fieldcheck`` logger:

- Console (default): key/value lines to stderr
- JSON (``log_json``): one JSON object per line to stderr
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from fieldcheck.config.settings import ValidationSettings

LOGGER_NAME = "fieldcheck"


def _build_formatter(*, log_json: bool, stream: TextIO) -> logging.Formatter:
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    settings: ValidationSettings | None = None,
    *,
    verbose: bool | None = None,
    log_json: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route ``fieldcheck`` log records through structlog.

    Explicit *verbose*/*log_json* win over *settings*. Calling this again
    replaces the handler instead of stacking another one.

    Returns:
        The configured ``fieldcheck`` logger.
    """
    settings = settings or ValidationSettings()
    verbose = settings.verbose if verbose is None else verbose
    log_json = settings.log_json if log_json is None else log_json
    stream = stream or sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(_build_formatter(log_json=log_json, stream=stream))

    lib_logger = logging.getLogger(LOGGER_NAME)
    lib_logger.handlers.clear()
    lib_logger.addHandler(handler)
    lib_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    lib_logger.propagate = False
    return lib_logger

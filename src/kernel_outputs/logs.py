from __future__ import annotations

import logging

import structlog
from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "kernel_outputs"

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structured logger backed by the stdlib logger `name`.

    Output goes through stdlib logging, so nothing is emitted until the
    host application (or `configure_logging`) enables the logger.

    Example:
        ```python
        log = get_logger(__name__)
        log.debug("stream_merged", execution_id="abc")
        ```
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Handler:
    """Attach a rich handler to the package logger at the given level.

    Calling it again replaces the previously installed handler.

    Example:
        ```python
        configure_logging("DEBUG")
        ```
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    logger.addHandler(handler)
    logger.setLevel(resolved)
    return handler

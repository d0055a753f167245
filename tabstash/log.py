"""Logging configuration using loguru.

The CLI logs to stderr.  Inside an editor the host passes ``pane`` (any
callable taking one line of text) and tabstash writes plain, uncoloured lines
to its output pane instead.  Records sent through stdlib ``logging`` by the
host or by libraries are intercepted and end up in the same place.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
PANE_FORMAT = "[tabstash] {time:HH:mm:ss} {level: <7} {message}"


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", pane: Callable[[str], None] | None = None) -> int:
    """Make loguru the only sink and return its handler id.

    With *pane* each record is passed as one line, without the trailing
    newline, formatted with ``PANE_FORMAT``.  Otherwise records go to stderr
    with ``CONSOLE_FORMAT``.  A host unloading the extension can pass the
    returned id to ``logger.remove``.
    """
    level = level.upper()
    logger.remove()

    if pane is None:
        handler_id = logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    else:

        def _to_pane(message: str) -> None:
            pane(message.rstrip("\n"))

        handler_id = logger.add(_to_pane, level=level, format=PANE_FORMAT, colorize=False)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logger.debug("Logging initialised (level={}, sink={})", level, "stderr" if pane is None else "pane")
    return handler_id

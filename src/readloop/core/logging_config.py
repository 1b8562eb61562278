"""Log routing for the readloop command.

Library modules only create module loggers (``logging.getLogger(__name__)``)
and never install handlers. The command calls ``configure_logging`` once to
send the ``readloop`` loggers to stderr and, when asked, to a file. Records
never go through the REPL output sink, where they would land between prompts.

``READLOOP_LOG_LEVEL`` and ``READLOOP_LOG_FILE`` fill in whatever the
command line leaves out.
"""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "readloop"
HANDLER_NAME = "readloop"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None, file_path: str | None = None) -> logging.Logger:
    """Route readloop's log records to stderr and optionally ``file_path``.

    Calling it again replaces the handlers a previous call installed and
    leaves handlers owned by anyone else alone.

    Returns:
        The configured ``readloop`` logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    level = level or os.environ.get("READLOOP_LOG_LEVEL", "WARNING")
    file_path = file_path or os.environ.get("READLOOP_LOG_FILE")

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in [h for h in logger.handlers if h.get_name() == HANDLER_NAME]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(numeric_level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if file_path:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger

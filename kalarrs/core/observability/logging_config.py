"""
Logging setup for the kalarrs CLI.

``main.py`` calls ``setup_logging`` once per invocation. Handlers hang
off the ``kalarrs`` logger rather than the root, so a program that
embeds the verification engine keeps its own logging configuration,
while every ``logging.getLogger(__name__)`` in this package lands here.

Level precedence: ``--debug`` / ``--verbose`` / ``--quiet``, then
``KALARRS_LOG_LEVEL``, then WARNING. ``KALARRS_LOG_FILE`` adds a file
handler at ``KALARRS_LOG_FILE_LEVEL``, DEBUG unless set, so the file
records every command the runner executed.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "kalarrs"

# Console: bare messages normally, logger names once the user asks for more.
_CONSOLE_FORMATS: dict[int, str] = {
    logging.DEBUG: "%(levelname)-7s %(name)s:%(lineno)d  %(message)s",
    logging.INFO: "%(name)s  %(message)s",
}
_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _StderrHandler(logging.StreamHandler):
    """Writes to the current ``sys.stderr``.

    click swaps the stream while a command runs under its test runner;
    binding at construction would leave a closed file behind.
    """

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Calling it again replaces the handlers it added before.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the log file; DEBUG when omitted.

    Returns:
        The configured ``kalarrs`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, "_kalarrs", False)]:
        logger.removeHandler(handler)
        handler.close()

    console_level = _parse_level(level)
    console = _StderrHandler()
    console._kalarrs = True
    console.setLevel(console_level)
    fmt = next(
        (f for threshold, f in sorted(_CONSOLE_FORMATS.items()) if console_level <= threshold),
        "%(message)s",
    )
    console.setFormatter(logging.Formatter(fmt))
    logger.addHandler(console)

    effective = console_level
    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh._kalarrs = True
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        logger.addHandler(fh)
        effective = min(effective, file_level)

    logger.setLevel(effective)
    return logger


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Level name to its numeric value; unknown names fall back to ``default``."""
    if not level:
        return default
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else default

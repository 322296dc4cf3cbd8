"""
Reporter: where verification results are announced.

The engine decides success or failure; a reporter decides how that
looks. The CLI installs a colored console reporter, everything else
falls back to logging.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class LoggingReporter:
    """Route notifications to the ``kalarrs`` loggers."""

    def success(self, message: str) -> None:
        logger.info(message)

    def warn(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)

    def info(self, message: str) -> None:
        logger.info(message)

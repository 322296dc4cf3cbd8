"""Adapters: bindings to the operating system shell.

Public re-exports for convenient access.
"""

from kalarrs.adapters.mock import MockCommandRunner
from kalarrs.adapters.shell.command import CommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
]

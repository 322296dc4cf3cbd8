"""
Remediation prompts: yes/no confirmation and free-text input.

The engine asks through a ``Prompter`` so tests can script answers.
``ClickPrompter`` is the interactive terminal implementation.
"""

from __future__ import annotations

from typing import Protocol

import click


class Prompter(Protocol):
    def confirm(self, message: str, default: bool = False) -> bool: ...

    def ask(self, message: str, default: str = "", secret: bool = False) -> str: ...


class ClickPrompter:
    """Read answers from standard input via click.

    With ``err`` set, questions go to stderr so stdout stays machine-readable.
    """

    def __init__(self, err: bool = False):
        self.err = err

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default, err=self.err)

    def ask(self, message: str, default: str = "", secret: bool = False) -> str:
        value = click.prompt(
            message,
            default=default,
            hide_input=secret,
            show_default=bool(default) and not secret,
            err=self.err,
        )
        return str(value).strip()

"""
Console reporter: colored success / warn / error lines for the CLI.
"""

from __future__ import annotations

import sys

import click

CHECK_MARK = "Y" if sys.platform == "win32" else "✓"


class ConsoleReporter:
    """Print verification results the way every CLI command shows them."""

    def __init__(self, quiet: bool = False, err: bool = False):
        self.quiet = quiet
        self.err = err

    def success(self, message: str) -> None:
        if self.quiet:
            return
        click.echo("[", nl=False, err=self.err)
        click.secho(CHECK_MARK, fg="green", nl=False, err=self.err)
        click.echo("] ", nl=False, err=self.err)
        click.secho(message, fg="green", err=self.err)

    def warn(self, message: str) -> None:
        click.secho(f"[Warn] {message}", fg="yellow", err=self.err)

    def error(self, message: str) -> None:
        click.echo("[", nl=False, err=self.err)
        click.secho("x", fg="red", nl=False, err=self.err)
        click.echo("] ", nl=False, err=self.err)
        click.secho(message, fg="red", err=self.err)

    def info(self, message: str) -> None:
        if self.quiet:
            return
        click.secho(f"  {message}", fg="cyan", err=self.err)

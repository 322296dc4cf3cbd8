"""
Shared CLI plumbing: settings and verifier construction from the click context.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from kalarrs.adapters.mock import MockCommandRunner
from kalarrs.core.config.loader import ConfigError, load_settings
from kalarrs.core.models.settings import Settings
from kalarrs.core.services.toolchain.engine import DependencyVerifier
from kalarrs.core.services.toolchain.prompts import ClickPrompter
from kalarrs.ui.cli.reporter import ConsoleReporter


def mock_runner() -> MockCommandRunner:
    """A runner that reports a healthy toolchain without running anything."""
    runner = MockCommandRunner()
    runner.set_output("node --version", stdout="v18.19.0\n")
    runner.set_output("pip3 --version", stdout="pip 23.3 from /usr/lib/python3/site-packages (python 3.11)\n")
    runner.set_output("aws --version", stdout="aws-cli/2.15.0 Python/3.11.6 Darwin/23.1.0\n")
    return runner


def resolve_path(path: str | None) -> Path:
    """``--path`` is relative to the current directory."""
    return (Path.cwd() / path).resolve() if path else Path.cwd()


def load_ctx_settings(ctx: click.Context) -> Settings:
    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def build_verifier(
    ctx: click.Context,
    settings: Settings,
    working_directory: Path | None = None,
    as_json: bool = False,
) -> DependencyVerifier:
    """Verifier wired to the terminal.

    In JSON mode prompts and status lines go to stderr, leaving stdout
    for the document.
    """
    no_install = ctx.obj.get("no_install", False)
    config = settings.engine_config(
        working_directory=working_directory,
        auto_install=False if no_install else None,
    )
    runner = mock_runner() if ctx.obj.get("mock") else None
    return DependencyVerifier(
        config=config,
        runner=runner,
        prompter=ClickPrompter(err=as_json),
        reporter=ConsoleReporter(quiet=ctx.obj.get("quiet", False), err=as_json),
    )

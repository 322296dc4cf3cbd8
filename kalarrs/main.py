"""
kalarrs: CLI entrypoint.

Usage:
    kalarrs --help
    kalarrs global serverless
    kalarrs workspace init --path my-workspace
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from kalarrs import __version__
from kalarrs.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="kalarrs")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to kalarrs.yml (default: auto-detect).",
)
@click.option("--no-install", is_flag=True, help="Report missing tools without offering to install.")
@click.option("--mock", is_flag=True, help="Use the mock runner (no real commands).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    no_install: bool,
    mock: bool,
) -> None:
    """kalarrs: bootstrap your serverless toolchain and workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["no_install"] = no_install
    ctx.obj["mock"] = mock

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("KALARRS_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("KALARRS_LOG_FILE"),
        log_file_level=os.environ.get("KALARRS_LOG_FILE_LEVEL"),
    )


# ── Register sub-command groups from kalarrs/ui/cli/ ────────────

from kalarrs.ui.cli.project import project
from kalarrs.ui.cli.toolchain import global_
from kalarrs.ui.cli.workspace import workspace

cli.add_command(global_)
cli.add_command(workspace)
cli.add_command(project)


if __name__ == "__main__":
    cli()

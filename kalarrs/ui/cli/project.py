"""
CLI commands for projects inside a workspace (``kalarrs project ...``).
"""

from __future__ import annotations

import sys

import click

from kalarrs.ui.cli.common import build_verifier, load_ctx_settings, resolve_path


@click.group()
def project() -> None:
    """Project: .NET solution, packages and serverless lookup for a project."""


@project.command()
@click.argument("name")
@click.option("--path", "-p", "path", default=None, help="Path to the project source.")
@click.pass_context
def solution(ctx: click.Context, name: str, path: str | None) -> None:
    """Ensure NAME.sln exists, creating it with the .NET CLI."""
    from kalarrs.core.services.dotnet_ops import check_for_solution
    from kalarrs.core.services.toolchain.errors import ToolchainError
    from kalarrs.core.services.toolchain.programs import check_dotnet_cli

    src_path = resolve_path(path)
    settings = load_ctx_settings(ctx)
    verifier = build_verifier(ctx, settings, working_directory=src_path)

    try:
        if not check_dotnet_cli(verifier).installed:
            sys.exit(1)
    except ToolchainError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if not check_for_solution(verifier, src_path, name):
        sys.exit(1)


@project.command()
@click.option("--path", "-p", "path", default=None, help="Path to the project.")
@click.pass_context
def install(ctx: click.Context, path: str | None) -> None:
    """Install the project's packages with yarn."""
    from kalarrs.core.services import yarn_ops

    project_path = resolve_path(path)
    settings = load_ctx_settings(ctx)
    verifier = build_verifier(ctx, settings, working_directory=project_path)

    if not yarn_ops.check_for_init(verifier, project_path):
        sys.exit(1)
    if not yarn_ops.install_packages(verifier, project_path):
        sys.exit(1)


@project.command("serverless-path")
@click.option("--path", "-p", "path", default=None, help="Path to the project.")
def serverless_path(path: str | None) -> None:
    """Print the serverless package a project would run.

    Looks in the project, then its workspace, then the home directory.
    """
    from kalarrs.core.services.serverless_ops import find_serverless_path
    from kalarrs.core.services.toolchain.errors import ToolchainError

    try:
        found = find_serverless_path(resolve_path(path))
    except ToolchainError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    click.echo(str(found))

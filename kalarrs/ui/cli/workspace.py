"""
CLI commands for serverless workspaces (``kalarrs workspace ...``).

Thin wrappers over ``kalarrs.core.use_cases.workspace_init``.
"""

from __future__ import annotations

import json
import sys

import click

from kalarrs.ui.cli.common import build_verifier, load_ctx_settings, resolve_path


@click.group()
def workspace() -> None:
    """Workspace: init a @kalarrs serverless workspace."""


@workspace.command()
@click.option("--path", "-p", "path", default=None, help="Path to workspace (relative to cwd).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init(ctx: click.Context, path: str | None, as_json: bool) -> None:
    """Set up git, yarn and the serverless files of a workspace."""
    from kalarrs.core.use_cases.workspace_init import init_workspace

    workspace_path = resolve_path(path)
    if not workspace_path.is_dir():
        click.secho(f"❌ Workspace directory not found: {workspace_path}", fg="red")
        sys.exit(1)

    settings = load_ctx_settings(ctx)
    verifier = build_verifier(ctx, settings, working_directory=workspace_path, as_json=as_json)
    result = init_workspace(verifier, settings, workspace_path)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.echo()
    if result.ok:
        click.secho(f"✅ Workspace ready: {workspace_path}", fg="green", bold=True)
    else:
        click.secho(f"⚠️  Workspace incomplete: {workspace_path}", fg="yellow", bold=True)

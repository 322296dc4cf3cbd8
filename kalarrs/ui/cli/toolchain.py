"""
CLI commands for the machine-wide toolchain (``kalarrs global ...``).

Thin wrappers over ``kalarrs.core.use_cases.global_setup``.
"""

from __future__ import annotations

import json
import sys

import click

from kalarrs.ui.cli.common import build_verifier, load_ctx_settings


@click.group("global")
def global_() -> None:
    """Global: verify and install the local toolchain."""


@global_.command("serverless")
@click.option("--profile", "aws_profile", default=None, help="AWS profile to verify (default: prompt).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def serverless(ctx: click.Context, aws_profile: str | None, as_json: bool) -> None:
    """Check node, yarn, serverless, .NET, Python and the AWS CLI.

    Examples:

        kalarrs global serverless

        kalarrs --no-install global sls --profile default
    """
    from kalarrs.core.use_cases.global_setup import run_global_setup

    settings = load_ctx_settings(ctx)
    verifier = build_verifier(ctx, settings, as_json=as_json)
    result = run_global_setup(verifier, settings, aws_profile=aws_profile)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.restart_required:
        click.echo()
        click.secho("🔄 Open a new shell so PATH changes apply, then run this again.", fg="yellow")
        return

    missing = result.missing
    if missing:
        click.echo()
        click.secho("❌ Missing:", fg="red", bold=True)
        for report in missing:
            click.echo(f"   • {report.dependency} ({report.status.value})")
        click.echo()
        sys.exit(1)

    click.echo()
    click.secho("✅ Toolchain ready", fg="green", bold=True)


global_.add_command(serverless, "sls")

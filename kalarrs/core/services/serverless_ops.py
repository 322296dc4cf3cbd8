"""
Serverless workspace files: serverless-user.yml, .env/dev.yml, serverless.yml.

Each ``check_for_*`` returns True when the file exists afterwards.
Existing files are never rewritten.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from kalarrs.core.services.toolchain.engine import DependencyVerifier
from kalarrs.core.services.toolchain.errors import ToolchainError

logger = logging.getLogger(__name__)

SERVERLESS_USER_FILE = "serverless-user.yml"
DEV_ENV_FILE = "dev.yml"
SERVERLESS_CONFIG_FILE = "serverless.yml"
ENV_DIR = ".env"


def workspace_serverless_config(api: str, profile: str, region: str) -> dict[str, Any]:
    """Base serverless.yml shared by every project in a workspace."""
    return {
        "service": api,
        "plugins": [
            "@kalarrs/serverless-shared-api-gateway",
            "@kalarrs/serverless-domain-manager",
        ],
        "provider": {
            "name": "aws",
            "stage": "${opt:stage, 'dev'}",
            "region": region,
            "profile": profile,
            "apiGatewayRestApiName": api + "-${self:provider.stage}",
        },
        "custom": {
            "user": "${file(./serverless-user.yml):custom.user}",
        },
    }


def write_yaml(path: Path, data: dict[str, Any]) -> None:
    path.write_text(
        yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )


def check_for_user_yaml(verifier: DependencyVerifier, workspace: Path) -> bool:
    target = workspace / SERVERLESS_USER_FILE
    if target.is_file():
        verifier.reporter.success(f"Workspace {SERVERLESS_USER_FILE}")
        return True

    verifier.reporter.error(f"Error: You do not have a {SERVERLESS_USER_FILE} file.")
    if not verifier.prompter.confirm(f"Would you like to create a {SERVERLESS_USER_FILE} file now?"):
        return False

    user = verifier.prompter.ask(
        "Please enter your username (first initial and last name e.g. 'ktopham')"
    )
    write_yaml(target, {"custom": {"user": user}})
    verifier.reporter.success(f"Workspace {SERVERLESS_USER_FILE}")
    return True


def check_for_dev_env_yaml(verifier: DependencyVerifier, workspace: Path) -> bool:
    target = workspace / ENV_DIR / DEV_ENV_FILE
    label = f"{ENV_DIR}/{DEV_ENV_FILE}"
    if target.is_file():
        verifier.reporter.success(f"Workspace {label}")
        return True

    verifier.reporter.error(f"Error: You do not have your {label} file configured.")
    if not verifier.prompter.confirm(f"Would you like to create a {DEV_ENV_FILE} file now?"):
        return False

    target.parent.mkdir(parents=True, exist_ok=True)
    write_yaml(target, {"provider": {"environment": {}}})
    verifier.reporter.success(f"Workspace {label}")
    return True


def check_for_serverless_yaml(
    verifier: DependencyVerifier,
    workspace: Path,
    region: str,
) -> bool:
    target = workspace / SERVERLESS_CONFIG_FILE
    if target.is_file():
        verifier.reporter.success(f"Workspace {SERVERLESS_CONFIG_FILE}")
        return True

    verifier.reporter.error(f"Error: You do not have a {SERVERLESS_CONFIG_FILE} file.")
    if not verifier.prompter.confirm(f"Would you like to create a {SERVERLESS_CONFIG_FILE} file now?"):
        return False

    api = verifier.prompter.ask("Please enter the name of your api", default="api")
    profile = verifier.prompter.ask("Please enter the name of your aws profile", default="default")
    write_yaml(target, workspace_serverless_config(api or "api", profile or "default", region))
    verifier.reporter.success(f"Workspace {SERVERLESS_CONFIG_FILE}")
    return True


def find_serverless_path(cwd: Path | None = None, home: Path | None = None) -> Path:
    """Locate the serverless package: project, then workspace, then home.

    Raises:
        ToolchainError: serverless is not installed in any of them.
    """
    cwd = cwd or Path.cwd()
    home = home or Path.home()
    candidates = [
        cwd / "node_modules" / "serverless",
        cwd.parent / "node_modules" / "serverless",
        home / "node_modules" / "serverless",
    ]
    for candidate in candidates:
        if candidate.exists():
            logger.debug("serverless found at %s", candidate)
            return candidate
    raise ToolchainError("Unable to find serverless. Did you forget to run yarn?")

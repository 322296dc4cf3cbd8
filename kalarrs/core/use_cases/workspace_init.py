"""
Workspace init use case: git, yarn and serverless files for a workspace.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kalarrs.core.models.dependency import VerificationReport
from kalarrs.core.models.settings import Settings
from kalarrs.core.services import git_ops, serverless_ops, yarn_ops
from kalarrs.core.services.toolchain.engine import DependencyVerifier
from kalarrs.core.services.toolchain.errors import ToolchainError


@dataclass
class WorkspaceInitResult:
    """Which workspace pieces are in place after ``init``."""

    workspace: Path
    git: bool = False
    ignored_added: list[str] = field(default_factory=list)
    yarn: bool = False
    dependencies: list[VerificationReport] = field(default_factory=list)
    packages_installed: bool = False
    files: dict[str, bool] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.git
            and self.yarn
            and all(r.installed for r in self.dependencies)
            and all(self.files.values())
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "workspace": str(self.workspace),
            "ok": self.ok,
            "git": self.git,
            "gitignore_added": self.ignored_added,
            "yarn": self.yarn,
            "dependencies": [r.to_dict() for r in self.dependencies],
            "packages_installed": self.packages_installed,
            "files": self.files,
        }
        if self.error:
            result["error"] = self.error
        return result


def init_workspace(
    verifier: DependencyVerifier,
    settings: Settings,
    workspace: Path,
) -> WorkspaceInitResult:
    result = WorkspaceInitResult(workspace=workspace)
    try:
        result.git = git_ops.check_for_init(verifier, workspace)
        if result.git:
            result.ignored_added = git_ops.check_workspace_files_ignored(
                verifier, workspace, settings.gitignore_patterns,
            )

        result.yarn = yarn_ops.check_for_init(verifier, workspace)
        if result.yarn:
            result.dependencies = yarn_ops.check_workspace_dependencies(
                verifier, workspace, settings.workspace_dependencies,
            )
            result.packages_installed = yarn_ops.install_packages(verifier, workspace)

        result.files[serverless_ops.SERVERLESS_USER_FILE] = (
            serverless_ops.check_for_user_yaml(verifier, workspace)
        )
        result.files[f"{serverless_ops.ENV_DIR}/{serverless_ops.DEV_ENV_FILE}"] = (
            serverless_ops.check_for_dev_env_yaml(verifier, workspace)
        )
        result.files[serverless_ops.SERVERLESS_CONFIG_FILE] = (
            serverless_ops.check_for_serverless_yaml(verifier, workspace, settings.aws_region)
        )
    except ToolchainError as e:
        result.error = str(e)

    return result

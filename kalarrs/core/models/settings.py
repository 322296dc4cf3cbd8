"""
Settings models: engine configuration and the optional kalarrs.yml.

``EngineConfig`` is what the verification engine receives on every call.
``Settings`` holds the user-tunable defaults loaded from ``kalarrs.yml``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_WORKSPACE_DEPENDENCIES = [
    "@kalarrs/serverless-domain-manager",
    "@kalarrs/serverless-shared-api-gateway",
    "@kalarrs/serverless-workspace-utils",
    "serverless",
]

DEFAULT_GITIGNORE_PATTERNS = [".serverless", "serverless-user.yml", "node_modules/"]


def default_shell_profile() -> Path:
    """The profile sourced before checks when nothing else is configured."""
    return Path.home() / ".bash_profile"


class EngineConfig(BaseModel):
    """Explicit configuration passed into the verification engine."""

    model_config = ConfigDict(frozen=True)

    working_directory: Path = Field(default_factory=Path.cwd)
    shell_profile_path: Path | None = None
    auto_install: bool = True

    def with_directory(self, path: Path) -> EngineConfig:
        """Same config, checks run from ``path``."""
        return self.model_copy(update={"working_directory": path})


class Settings(BaseModel):
    """Defaults read from kalarrs.yml (every key optional)."""

    shell_profile: Path | None = None
    auto_install: bool = True
    node_min_version: str = "8.10"
    python_min_version: str = "3.6"
    aws_region: str = "us-west-2"
    workspace_dependencies: list[str] = Field(
        default_factory=lambda: list(DEFAULT_WORKSPACE_DEPENDENCIES),
    )
    gitignore_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GITIGNORE_PATTERNS),
    )

    def engine_config(
        self,
        working_directory: Path | None = None,
        auto_install: bool | None = None,
    ) -> EngineConfig:
        """Build the engine config, CLI overrides taking precedence."""
        profile = self.shell_profile.expanduser() if self.shell_profile else default_shell_profile()
        return EngineConfig(
            working_directory=working_directory or Path.cwd(),
            shell_profile_path=profile,
            auto_install=self.auto_install if auto_install is None else auto_install,
        )

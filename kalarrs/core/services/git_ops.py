"""
Git workspace setup: repository init and default ignore patterns.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from kalarrs.core.services.toolchain.engine import DependencyVerifier

logger = logging.getLogger(__name__)


def initialize_repository(verifier: DependencyVerifier, path: Path) -> bool:
    """Run ``git init`` in ``path``."""
    result = verifier.runner.run("git init", cwd=path)
    if result.exit_code != 0:
        logger.warning("git init failed in %s: %s", path, result.stderr.strip())
    return result.exit_code == 0


def check_for_init(verifier: DependencyVerifier, path: Path) -> bool:
    """Ensure ``path`` is a git repository, offering to create one."""
    if not (path / ".git").exists():
        verifier.reporter.error(".git directory was not found")
        if not verifier.prompter.confirm("Would you like to use git for version control?"):
            return False
        if not initialize_repository(verifier, path):
            verifier.reporter.error("Unable to init git")
            return False

    verifier.reporter.success("Git is initialized")
    return True


def is_ignored(verifier: DependencyVerifier, path: Path, pattern: str) -> bool:
    """Whether git already ignores ``pattern`` inside ``path``."""
    result = verifier.runner.run(f"git check-ignore -q {shlex.quote(pattern)}", cwd=path)
    return result.exit_code == 0


def add_to_ignore(path: Path, pattern: str) -> None:
    """Append ``pattern`` to ``path/.gitignore`` on its own line."""
    gitignore = path / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.is_file() else ""
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with gitignore.open("a", encoding="utf-8") as fh:
        fh.write(f"{prefix}{pattern}\n")


def check_workspace_files_ignored(
    verifier: DependencyVerifier,
    path: Path,
    patterns: list[str],
) -> list[str]:
    """Make sure every pattern is ignored.

    Returns:
        The patterns that had to be added.
    """
    added: list[str] = []
    for pattern in patterns:
        if not is_ignored(verifier, path, pattern):
            add_to_ignore(path, pattern)
            added.append(pattern)

    if added:
        verifier.reporter.success(f"Added {', '.join(added)} to .gitignore")
    else:
        verifier.reporter.success("Default values are present in .gitignore")
    return added

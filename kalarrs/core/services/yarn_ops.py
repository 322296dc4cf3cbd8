"""
Yarn workspace setup: package.json, workspace dev dependencies, install.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from kalarrs.core.models.dependency import (
    CustomPredicate,
    DependencySpec,
    ExecutionResult,
    Outcome,
    VerificationReport,
)
from kalarrs.core.services.toolchain.engine import DependencyVerifier

logger = logging.getLogger(__name__)


def initialize_yarn(verifier: DependencyVerifier, path: Path) -> bool:
    """Create a package.json with ``yarn init -y``."""
    result = verifier.runner.run("yarn init -y", cwd=path)
    return result.exit_code == 0


def check_for_init(verifier: DependencyVerifier, path: Path) -> bool:
    """Ensure ``path`` has a package.json, offering to create one."""
    if not (path / "package.json").is_file():
        verifier.reporter.error("package.json was not found")
        if not verifier.prompter.confirm("Would you like use yarn for package management?"):
            return False
        if not initialize_yarn(verifier, path):
            verifier.reporter.error("Unable to init yarn")
            return False

    verifier.reporter.success("Yarn is initialized")
    return True


def classify_package(result: ExecutionResult, name: str) -> Outcome:
    if re.search(r"cannot find module", result.stderr, re.IGNORECASE):
        return Outcome.NOT_INSTALLED
    # Present, but its package.json is hidden behind "exports".
    if "ERR_PACKAGE_PATH_NOT_EXPORTED" in result.stderr:
        return Outcome.INSTALLED
    return Outcome.AMBIGUOUS


def package_spec(package: str) -> DependencySpec:
    """Spec for one dev dependency resolved from the workspace."""
    return DependencySpec(
        name=package,
        check_command=f"node -e \"require.resolve('{package}/package.json')\"",
        install_command=f"yarn add {package} --dev --ignore-engines",
        classifier=CustomPredicate(fn=classify_package),
        prompt=f"Add {package} to the workspace?",
    )


def check_workspace_dependencies(
    verifier: DependencyVerifier,
    path: Path,
    packages: list[str],
) -> list[VerificationReport]:
    """Verify each workspace package, one at a time."""
    workspace = verifier.for_directory(path)
    return workspace.verify_all(package_spec(p) for p in packages)


def install_packages(verifier: DependencyVerifier, path: Path) -> bool:
    """Run ``yarn`` in ``path`` so node_modules matches the lock file."""
    (path / "node_modules").mkdir(exist_ok=True)
    result = verifier.runner.run("yarn", cwd=path)
    if result.exit_code != 0:
        verifier.reporter.error("yarn install failed")
        logger.warning("yarn in %s: %s", path, result.stderr.strip())
        return False
    verifier.reporter.success("Packages installed")
    return True

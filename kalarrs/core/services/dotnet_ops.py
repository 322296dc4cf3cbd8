"""
.NET solution files: check for and create ``<name>.sln``.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from kalarrs.core.services.toolchain.engine import DependencyVerifier


def create_solution(verifier: DependencyVerifier, src_path: Path, solution_name: str) -> bool:
    result = verifier.runner.run(f"dotnet new sln --name {shlex.quote(solution_name)}", cwd=src_path)
    return result.exit_code == 0


def check_for_solution(verifier: DependencyVerifier, src_path: Path, solution_name: str) -> bool:
    """Ensure ``src_path/<solution_name>.sln`` exists, offering to create it."""
    solution = src_path / f"{solution_name}.sln"
    if solution.is_file():
        verifier.reporter.success(f"Solution {solution} exists")
        return True

    verifier.reporter.error(f"Error: You do not have a solution file at {solution}")
    if not verifier.prompter.confirm("Would you like to create a solution file now?"):
        return False

    created = create_solution(verifier, src_path, solution_name)
    if created:
        verifier.reporter.success(f"Solution {solution} created.")
    else:
        verifier.reporter.error(f"Error: Solution {solution} was not created.")
    return created

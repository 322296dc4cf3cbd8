"""
Global setup use case: verify the serverless toolchain on this machine.

Runs every tool check in order and stops at the first fatal error.
Missing tools are collected, not raised, so the caller can print the
whole picture before deciding on an exit status.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kalarrs.core.models.dependency import Platform, ReportStatus, VerificationReport
from kalarrs.core.models.settings import Settings
from kalarrs.core.services.toolchain import programs
from kalarrs.core.services.toolchain.engine import DependencyVerifier
from kalarrs.core.services.toolchain.errors import ToolchainError

# Reported but never blocking.
_ADVISORY_STATUSES = {ReportStatus.UNSATISFIED_VERSION}


@dataclass
class GlobalSetupResult:
    """Outcome of the global toolchain checks."""

    reports: list[VerificationReport] = field(default_factory=list)
    error: str | None = None

    @property
    def missing(self) -> list[VerificationReport]:
        return [
            r for r in self.reports
            if not r.installed and r.status not in _ADVISORY_STATUSES
        ]

    @property
    def restart_required(self) -> bool:
        return any(r.restart_required for r in self.reports)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.missing

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "ok": self.ok,
            "restart_required": self.restart_required,
            "reports": [r.to_dict() for r in self.reports],
        }
        if self.error:
            result["error"] = self.error
        return result


def run_global_setup(
    verifier: DependencyVerifier,
    settings: Settings,
    aws_profile: str | None = None,
) -> GlobalSetupResult:
    """Check node, Homebrew (macOS), yarn, serverless, .NET, Python (macOS),
    the AWS CLI and an AWS profile.
    """
    result = GlobalSetupResult()
    try:
        result.reports.append(programs.check_node_version(verifier, settings.node_min_version))

        is_macos = verifier.platform == Platform.MACOS
        if is_macos:
            result.reports.append(programs.check_homebrew(verifier))
        result.reports.append(programs.check_yarn(verifier))
        result.reports.append(programs.check_serverless(verifier))
        result.reports.append(programs.check_dotnet_cli(verifier))
        if is_macos:
            python = programs.check_python(verifier, settings.python_min_version)
            result.reports.append(python)
            if python.restart_required:
                return result

        aws_cli = programs.check_aws_cli(verifier)
        result.reports.append(aws_cli)
        profile = programs.check_aws_profile(
            verifier,
            has_aws_cli=aws_cli.installed,
            region=settings.aws_region,
            profile_name=aws_profile,
        )
        if profile is not None:
            result.reports.append(profile)
    except ToolchainError as e:
        result.error = str(e)

    return result

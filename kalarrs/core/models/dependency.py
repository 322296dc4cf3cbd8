"""
Dependency models: the verification contract.

A ``DependencySpec`` describes how to detect and install one external
tool. The engine runs its check command, hands the captured
``ExecutionResult`` to the dependency's classifier and returns a
``VerificationReport`` to the caller. Nothing here performs I/O.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Platform(StrEnum):
    """Operating systems an install command can be mapped to."""

    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"
    OTHER = "other"


class Outcome(StrEnum):
    """Classification of a check command's result."""

    INSTALLED = "installed"
    NOT_INSTALLED = "not_installed"
    AMBIGUOUS = "ambiguous"


class ReportStatus(StrEnum):
    """Final state of one verification call."""

    INSTALLED = "installed"
    DECLINED = "declined"
    AUTO_INSTALL_DISABLED = "auto_install_disabled"
    NO_REMEDIATION = "no_remediation"
    REMEDIATION_FAILED = "remediation_failed"
    REMEDIATION_ABORTED = "remediation_aborted"
    UNSATISFIED_VERSION = "unsatisfied_version"


class ExecutionResult(BaseModel):
    """Captured output of one shell command. Never mutated."""

    model_config = ConfigDict(frozen=True)

    command: str = ""
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Exit code 0 and nothing at all written to stderr.

        A lone newline still counts as output; tools that chatter on
        stderr need a classifier.
        """
        return self.exit_code == 0 and self.stderr == ""


# ── Classifiers ─────────────────────────────────────────────────

_POSIX_NOT_FOUND = re.compile(r"command not found|: not found\s*$", re.IGNORECASE | re.MULTILINE)

# Shell phrasing for a missing executable, per platform.
_NOT_FOUND_PATTERNS: dict[Platform, re.Pattern[str]] = {
    Platform.MACOS: _POSIX_NOT_FOUND,
    Platform.LINUX: _POSIX_NOT_FOUND,
    Platform.OTHER: _POSIX_NOT_FOUND,
    Platform.WINDOWS: re.compile(
        r"is not recognized as an internal or external command"
        r"|is not recognized as the name of a cmdlet",
        re.IGNORECASE,
    ),
}


def looks_like_command_not_found(stderr: str, platform: Platform = Platform.LINUX) -> bool:
    """Whether ``stderr`` is the shell reporting a missing executable."""
    return bool(_NOT_FOUND_PATTERNS[platform].search(stderr or ""))


class DefaultHeuristic(BaseModel):
    """NotInstalled on a "command not found" message, Ambiguous otherwise."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default"] = "default"

    def classify(
        self, result: ExecutionResult, name: str, platform: Platform = Platform.LINUX,
    ) -> Outcome:
        if looks_like_command_not_found(result.stderr, platform):
            return Outcome.NOT_INSTALLED
        return Outcome.AMBIGUOUS


class CustomPredicate(BaseModel):
    """Delegate to a pure function of ``(result, name) -> Outcome``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["custom"] = "custom"
    fn: Callable[[ExecutionResult, str], Outcome]

    def classify(
        self, result: ExecutionResult, name: str, platform: Platform = Platform.LINUX,
    ) -> Outcome:
        return Outcome(self.fn(result, name))


class TreatAsInstalled(BaseModel):
    """Any completed check counts as installed (tools that chatter on stderr)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["installed"] = "installed"

    def classify(
        self, result: ExecutionResult, name: str, platform: Platform = Platform.LINUX,
    ) -> Outcome:
        return Outcome.INSTALLED


Classifier = Annotated[
    Union[DefaultHeuristic, CustomPredicate, TreatAsInstalled],
    Field(discriminator="kind"),
]


# ── Spec / report ───────────────────────────────────────────────


class DependencySpec(BaseModel):
    """How to detect and install one dependency.

    ``install_command`` is either a single command or a per-platform
    mapping. ``remediate`` replaces the install command for interactive
    remediations (e.g. collecting AWS credentials); it returns the
    command output or raises ``RemediationAborted``. ``report_detail``
    stands in for the first output line on checks whose output is
    secret.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    check_command: str
    install_command: str | dict[Platform, str] | None = None
    classifier: Classifier = Field(default_factory=DefaultHeuristic)
    auto_install: bool = True
    prompt: str | None = None
    remediate: Callable[[], str] | None = None
    report_detail: str | None = None

    @property
    def prompt_message(self) -> str:
        return self.prompt or f"Install {self.name}?"

    @property
    def can_remediate(self) -> bool:
        return self.remediate is not None or bool(self.install_command)


class VerificationReport(BaseModel):
    """Result of verifying one dependency, consumed by the calling step."""

    dependency: str
    status: ReportStatus
    detail: str | None = None
    restart_required: bool = False

    @property
    def installed(self) -> bool:
        return self.status == ReportStatus.INSTALLED

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "dependency": self.dependency,
            "installed": self.installed,
            "status": self.status.value,
            "detail": self.detail,
            "restart_required": self.restart_required,
        }

"""
Toolchain errors: the fatal paths of dependency verification.

Recognized "not installed" results are never raised; they come back
as ``VerificationReport`` statuses. These exceptions are reserved for
conditions the engine cannot decide on.
"""

from __future__ import annotations


class ToolchainError(Exception):
    """Base class for toolchain failures surfaced to the CLI."""


class DependencyCheckError(ToolchainError):
    """A check command failed in a way no classifier recognized."""

    def __init__(self, dependency: str, command: str, stderr: str):
        self.dependency = dependency
        self.command = command
        self.stderr = stderr
        super().__init__(f"Unable to run {command}. Error: {stderr.strip()}")


class UnsupportedPlatformError(ToolchainError):
    """No install command is mapped for the current operating system."""

    def __init__(self, platform: str, dependency: str | None = None):
        self.platform = platform
        self.dependency = dependency
        target = f" for {dependency}" if dependency else ""
        super().__init__(f"Unsupported platform '{platform}'{target}")


class RemediationAborted(ToolchainError):
    """A remediation step refused to run; nothing was changed."""


class PartialCredentialInputError(RemediationAborted):
    """Only one of a required pair of secrets was supplied."""


class InvalidConstraintError(ToolchainError, ValueError):
    """A minimum-version setting that no version could be compared to."""

    def __init__(self, constraint: str, reason: str = ""):
        self.constraint = constraint
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Invalid version constraint '{constraint}'{suffix}")

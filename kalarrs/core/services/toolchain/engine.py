"""
Dependency verification engine: check, classify, remediate, re-check.

State machine for a single ``verify`` call::

    Checking ─┬─ Installed ─────────────────────────────── done
              ├─ NotInstalled + auto-install off ────────── done
              └─ NotInstalled + prompt ─┬─ Declined ─────── done
                                        └─ Accepted → Installing
                                             → Rechecking ─ done

The re-check happens at most once and never prompts again, so a
broken install command cannot loop.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from kalarrs.adapters.shell.command import CommandRunner
from kalarrs.core.models.dependency import (
    DependencySpec,
    ExecutionResult,
    Outcome,
    Platform,
    ReportStatus,
    VerificationReport,
)
from kalarrs.core.models.settings import EngineConfig
from kalarrs.core.services.toolchain.errors import DependencyCheckError, RemediationAborted
from kalarrs.core.services.toolchain.platform import detect_platform, resolve_install_command
from kalarrs.core.services.toolchain.prompts import ClickPrompter, Prompter
from kalarrs.core.services.toolchain.reporter import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

MAX_RECHECKS = 1


class DependencyVerifier:
    """Run the check → classify → prompt → install → re-check protocol.

    Args:
        config: Working directory, shell profile and auto-install default.
        runner: Executes check and install commands.
        prompter: Asks the user before anything is installed.
        reporter: Receives success / error notifications.
        platform: Overrides OS detection (tests, cross-platform previews).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        reporter: Reporter | None = None,
        platform: Platform | None = None,
    ):
        self.config = config or EngineConfig()
        self.runner = runner or CommandRunner()
        self.prompter = prompter or ClickPrompter()
        self.reporter = reporter or LoggingReporter()
        self._platform = platform

    @property
    def platform(self) -> Platform:
        if self._platform is None:
            self._platform = detect_platform()
        return self._platform

    def for_directory(self, path: Path) -> DependencyVerifier:
        """A verifier sharing collaborators but running checks in ``path``."""
        return DependencyVerifier(
            config=self.config.with_directory(path),
            runner=self.runner,
            prompter=self.prompter,
            reporter=self.reporter,
            platform=self._platform,
        )

    # ── Probe ───────────────────────────────────────────────────

    def probe(self, spec: DependencySpec) -> tuple[Outcome, ExecutionResult]:
        """Run the check command once and classify the result.

        Raises:
            DependencyCheckError: The classifier could not decide.
        """
        result = self.runner.run(
            spec.check_command,
            cwd=self.config.working_directory,
            source_profile=self.config.shell_profile_path,
        )
        if result.ok:
            return Outcome.INSTALLED, result

        outcome = spec.classifier.classify(result, spec.name, self.platform)
        logger.debug("%s classified as %s (exit %d)", spec.name, outcome, result.exit_code)
        if outcome == Outcome.AMBIGUOUS:
            raise DependencyCheckError(spec.name, spec.check_command, result.stderr)
        return outcome, result

    # ── Verify ──────────────────────────────────────────────────

    def verify(
        self,
        spec: DependencySpec,
        allow_auto_install: bool | None = None,
    ) -> VerificationReport:
        """Determine whether ``spec`` is present and optionally install it.

        Args:
            spec: The dependency to verify.
            allow_auto_install: Offer to install when missing. Defaults to
                ``config.auto_install`` combined with ``spec.auto_install``.

        Raises:
            DependencyCheckError: Unclassifiable check failure.
            UnsupportedPlatformError: No install command for this OS.
        """
        if allow_auto_install is None:
            allow_auto_install = self.config.auto_install and spec.auto_install

        outcome, result = self.probe(spec)
        if outcome == Outcome.INSTALLED:
            return self._installed(spec, result)

        if not allow_auto_install or not spec.can_remediate:
            self.reporter.error(f"{spec.name} not installed")
            return VerificationReport(
                dependency=spec.name,
                status=(
                    ReportStatus.AUTO_INSTALL_DISABLED if not allow_auto_install
                    else ReportStatus.NO_REMEDIATION
                ),
                detail=result.stderr.strip() or None,
            )

        self.reporter.error(f"{spec.name} not installed")
        install_command = resolve_install_command(spec, self.platform)
        if not self.prompter.confirm(spec.prompt_message):
            return VerificationReport(
                dependency=spec.name,
                status=ReportStatus.DECLINED,
                detail=result.stderr.strip() or None,
            )

        try:
            self._remediate(spec, install_command)
        except RemediationAborted as e:
            self.reporter.error(str(e))
            return VerificationReport(
                dependency=spec.name,
                status=ReportStatus.REMEDIATION_ABORTED,
                detail=str(e),
            )

        for _ in range(MAX_RECHECKS):
            outcome, result = self.probe(spec)
            if outcome == Outcome.INSTALLED:
                return self._installed(spec, result)

        self.reporter.error(f"{spec.name} is still not installed")
        return VerificationReport(
            dependency=spec.name,
            status=ReportStatus.REMEDIATION_FAILED,
            detail=result.stderr.strip() or None,
        )

    def verify_all(
        self,
        specs: Iterable[DependencySpec],
        allow_auto_install: bool | None = None,
    ) -> list[VerificationReport]:
        """Verify ``specs`` strictly one after another.

        Installs into a shared workspace must not overlap: concurrent
        package-manager runs against one lock file corrupt it.
        """
        return [self.verify(spec, allow_auto_install) for spec in specs]

    # ── Internals ───────────────────────────────────────────────

    def _remediate(self, spec: DependencySpec, install_command: str | None) -> None:
        if spec.remediate is not None:
            spec.remediate()
            return

        self.reporter.info(f"Running {install_command}")
        result = self.runner.run(
            install_command,
            cwd=self.config.working_directory,
            source_profile=self.config.shell_profile_path,
        )
        if result.exit_code != 0:
            logger.warning(
                "Install of %s exited %d: %s",
                spec.name, result.exit_code, _first_line(result.stderr),
            )

    def _installed(self, spec: DependencySpec, result: ExecutionResult) -> VerificationReport:
        self.reporter.success(f"{spec.name} installed")
        if spec.report_detail is not None:
            detail = spec.report_detail
        else:
            detail = _first_line(result.stdout) or _first_line(result.stderr) or None
        return VerificationReport(
            dependency=spec.name,
            status=ReportStatus.INSTALLED,
            detail=detail,
        )


def _first_line(text: str) -> str:
    text = (text or "").strip()
    return text.splitlines()[0].strip() if text else ""

"""
Shell command runner: execute shell command strings.

This is the single place where the toolchain checks and installs
shell out. Output is captured, never raised: a non-zero exit comes
back as an ``ExecutionResult`` for the classifier to interpret.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from pathlib import Path

from kalarrs.core.models.dependency import ExecutionResult

logger = logging.getLogger(__name__)

# Characters of output echoed into the debug log per stream.
_LOG_PREVIEW = 2000


def with_profile(command: str, profile: Path | None) -> str:
    """Prefix ``command`` so ``profile`` is sourced in the same shell.

    The profile's own output is discarded so it never reaches the
    classifier. Windows shells have no profile to source.
    """
    if profile is None or sys.platform == "win32" or not profile.is_file():
        return command
    return f". {shlex.quote(str(profile))} >/dev/null 2>&1; {command}"


def _redact(text: str, secrets: tuple[str, ...]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, "****")
    return text


class CommandRunner:
    """Run shell commands and capture exit code, stdout and stderr.

    Output is returned whole; install logs can run to megabytes and
    the classifier may need any part of them. No timeout is applied:
    an interactive install may legitimately wait on the user or the
    network for a long time.
    """

    def run(
        self,
        command: str,
        cwd: Path | str | None = None,
        *,
        source_profile: Path | None = None,
        redact: tuple[str, ...] = (),
    ) -> ExecutionResult:
        shell_command = with_profile(command, source_profile)
        logged = _redact(command, redact)
        logger.debug("Executing: %s (cwd=%s)", logged, cwd)

        try:
            result = subprocess.run(
                shell_command,
                shell=True,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            logger.debug("Command could not start: %s", e)
            return ExecutionResult(command=logged, exit_code=127, stderr=str(e))

        logger.debug("Exit %d: %s", result.returncode, logged)
        if result.stderr:
            logger.debug("stderr: %s", _redact(result.stderr[-_LOG_PREVIEW:], redact))
        return ExecutionResult(
            command=logged,
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

"""
Mock command runner: test double for every shell-out.

Used in mock mode to walk the workflows without touching real
package managers. Responses are matched by command prefix; the
first matching rule wins, and unmatched commands succeed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kalarrs.core.models.dependency import ExecutionResult


@dataclass
class RecordedCall:
    """One command the mock received."""

    command: str
    cwd: str | None
    source_profile: Path | None
    redact: tuple[str, ...] = ()


class MockCommandRunner:
    """Scripted stand-in for ``CommandRunner``.

    A rule can hold a single result or a list consumed in order
    (the last entry repeats), which models a tool that appears
    only after its install command ran.
    """

    def __init__(self, default_output: str = "[mock] executed"):
        self._default_output = default_output
        self._rules: list[tuple[str, list[ExecutionResult]]] = []
        self._call_log: list[RecordedCall] = []

    @property
    def call_log(self) -> list[RecordedCall]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def commands(self) -> list[str]:
        return [c.command for c in self._call_log]

    def calls_starting_with(self, prefix: str) -> list[RecordedCall]:
        return [c for c in self._call_log if c.command.startswith(prefix)]

    def set_response(
        self,
        prefix: str,
        *results: ExecutionResult,
    ) -> None:
        """Answer commands starting with ``prefix`` with ``results`` in order."""
        self._rules.append((prefix, list(results)))

    def set_output(self, prefix: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.set_response(
            prefix, ExecutionResult(exit_code=exit_code, stdout=stdout, stderr=stderr),
        )

    def set_not_found(self, prefix: str) -> None:
        """Make ``prefix`` fail the way a shell reports a missing executable."""
        executable = prefix.split()[0]
        self.set_output(prefix, stderr=f"sh: {executable}: command not found", exit_code=127)

    def run(
        self,
        command: str,
        cwd: Path | str | None = None,
        *,
        source_profile: Path | None = None,
        redact: tuple[str, ...] = (),
    ) -> ExecutionResult:
        self._call_log.append(
            RecordedCall(
                command=command,
                cwd=str(cwd) if cwd else None,
                source_profile=source_profile,
                redact=redact,
            )
        )
        for prefix, results in self._rules:
            if command.startswith(prefix):
                result = results.pop(0) if len(results) > 1 else results[0]
                return result.model_copy(update={"command": command})
        return ExecutionResult(command=command, stdout=self._default_output)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._rules.clear()

"""
Tests for the shell command runner and its mock.
"""

import logging
import sys
from pathlib import Path

import pytest

from kalarrs.adapters.mock import MockCommandRunner
from kalarrs.adapters.shell.command import CommandRunner, with_profile
from kalarrs.core.models.dependency import ExecutionResult

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")


@posix_only
class TestCommandRunner:
    def test_captures_stdout(self, tmp_path: Path):
        result = CommandRunner().run("echo hello", cwd=tmp_path)
        assert result.exit_code == 0
        assert result.stdout.strip() == "hello"
        assert result.ok

    def test_nonzero_exit_is_returned_not_raised(self, tmp_path: Path):
        result = CommandRunner().run("echo oops >&2; exit 3", cwd=tmp_path)
        assert result.exit_code == 3
        assert result.stderr.strip() == "oops"
        assert not result.ok

    def test_missing_command(self, tmp_path: Path):
        result = CommandRunner().run("definitely-not-a-real-tool-xyz --version", cwd=tmp_path)
        assert result.exit_code == 127
        assert "not found" in result.stderr.lower()

    def test_runs_in_cwd(self, tmp_path: Path):
        (tmp_path / "marker.txt").write_text("x")
        result = CommandRunner().run("ls", cwd=tmp_path)
        assert "marker.txt" in result.stdout

    def test_missing_cwd_is_a_result(self, tmp_path: Path):
        result = CommandRunner().run("echo hi", cwd=tmp_path / "nope")
        assert result.exit_code == 127

    def test_sources_profile_in_same_shell(self, tmp_path: Path):
        profile = tmp_path / ".bash_profile"
        profile.write_text('echo noisy\nexport KALARRS_TEST_VAR="from-profile"\n')

        result = CommandRunner().run('echo "$KALARRS_TEST_VAR"', cwd=tmp_path, source_profile=profile)

        assert result.stdout.strip() == "from-profile"

    def test_large_output_is_kept_whole(self, tmp_path: Path):
        command = "printf AAAAAAAAAA; head -c 1048576 /dev/zero | tr '\\0' B"

        result = CommandRunner().run(command, cwd=tmp_path)

        assert len(result.stdout) == 1048586
        assert result.stdout.startswith("AAAAAAAAAA")
        assert result.stdout.endswith("B")

    def test_newline_only_stderr_is_not_clean(self, tmp_path: Path):
        result = CommandRunner().run("echo >&2", cwd=tmp_path)
        assert result.exit_code == 0
        assert result.stderr == "\n"
        assert not result.ok

    def test_secrets_redacted_in_log(self, tmp_path: Path, caplog):
        with caplog.at_level(logging.DEBUG, logger="kalarrs.adapters.shell.command"):
            result = CommandRunner().run("echo s3cr3t >/dev/null", cwd=tmp_path, redact=("s3cr3t",))
        assert "s3cr3t" not in caplog.text
        assert "s3cr3t" not in result.command


class TestWithProfile:
    def test_no_profile(self):
        assert with_profile("yarn --version", None) == "yarn --version"

    def test_missing_profile_file(self, tmp_path: Path):
        assert with_profile("yarn --version", tmp_path / "absent") == "yarn --version"

    @posix_only
    def test_existing_profile(self, tmp_path: Path):
        profile = tmp_path / ".bash_profile"
        profile.write_text("")
        command = with_profile("yarn --version", profile)
        assert command.startswith(". ")
        assert command.endswith("; yarn --version")


class TestMockCommandRunner:
    def test_default_success(self):
        mock = MockCommandRunner()
        result = mock.run("anything")
        assert result.ok
        assert result.command == "anything"
        assert mock.call_count == 1

    def test_prefix_rule(self):
        mock = MockCommandRunner()
        mock.set_output("yarn", stdout="1.22.0")
        assert mock.run("yarn --version").stdout == "1.22.0"
        assert mock.run("node --version").stdout == "[mock] executed"

    def test_sequence_then_repeat_last(self):
        mock = MockCommandRunner()
        mock.set_response("x", ExecutionResult(exit_code=1), ExecutionResult(exit_code=0))
        assert [mock.run("x").exit_code for _ in range(3)] == [1, 0, 0]

    def test_not_found(self):
        mock = MockCommandRunner()
        mock.set_not_found("sls --version")
        result = mock.run("sls --version")
        assert result.exit_code == 127
        assert "command not found" in result.stderr

    def test_reset(self):
        mock = MockCommandRunner()
        mock.set_output("x", stdout="y")
        mock.run("x")
        mock.reset()
        assert mock.call_count == 0
        assert mock.run("x").stdout == "[mock] executed"

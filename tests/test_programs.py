"""
Tests for the tool checks built on the engine.
"""

from pathlib import Path

import pytest

from kalarrs.core.models.dependency import ExecutionResult, Outcome, Platform, ReportStatus
from kalarrs.core.services.toolchain import programs
from kalarrs.core.services.toolchain.errors import DependencyCheckError, InvalidConstraintError


class TestSimpleTools:
    def test_yarn_installed(self, verifier, runner, prompter):
        runner.set_output("yarn --version", stdout="1.22.0\n")

        report = programs.check_yarn(verifier)

        assert report.installed
        assert prompter.questions == []

    def test_serverless_declined(self, verifier, runner, prompter):
        runner.set_output("sls --version", stderr="sls: command not found", exit_code=1)
        prompter.confirms.append(False)

        report = programs.check_serverless(verifier)

        assert not report.installed
        assert runner.call_count == 1

    def test_yarn_install_command_per_platform(self, make_verifier, runner, prompter):
        runner.set_response(
            "yarn --version",
            ExecutionResult(exit_code=127, stderr="yarn: command not found"),
            ExecutionResult(stdout="1.22.0"),
        )
        prompter.confirms.append(True)

        programs.check_yarn(make_verifier(platform=Platform.MACOS))

        assert "brew update && brew install yarn" in runner.commands()

    def test_homebrew_only_maps_macos(self):
        assert set(programs.homebrew_spec().install_command) == {Platform.MACOS}


class TestDotnet:
    def test_version_on_stdout(self):
        result = ExecutionResult(exit_code=0, stdout="8.0.100\n", stderr="Welcome to .NET!")
        assert programs.classify_dotnet(result, ".NET") == Outcome.INSTALLED

    def test_no_sdk(self):
        result = ExecutionResult(exit_code=145, stdout="", stderr="No .NET SDKs were found.")
        assert programs.classify_dotnet(result, ".NET") == Outcome.NOT_INSTALLED

    def test_command_not_found(self):
        result = ExecutionResult(exit_code=127, stderr="dotnet: command not found")
        assert programs.classify_dotnet(result, ".NET") == Outcome.NOT_INSTALLED

    def test_other(self):
        result = ExecutionResult(exit_code=1, stderr="corrupt install")
        assert programs.classify_dotnet(result, ".NET") == Outcome.AMBIGUOUS

    def test_check_with_first_run_banner(self, verifier, runner):
        runner.set_output("dotnet --version", stdout="8.0.100\n", stderr="Welcome to .NET!")
        assert programs.check_dotnet_cli(verifier).installed


class TestAwsCli:
    def test_version_on_stderr_with_nonzero_exit(self, verifier, runner, prompter):
        runner.set_output(
            "aws --version",
            stderr="aws-cli/1.11.190 Python/3.6.3 Darwin/17.3.0 botocore/1.7.48",
            exit_code=1,
        )

        report = programs.check_aws_cli(verifier)

        assert report.installed
        assert prompter.questions == []

    def test_missing(self):
        result = ExecutionResult(exit_code=127, stderr="aws: command not found")
        assert programs.classify_aws_cli(result, "aws-cli") == Outcome.NOT_INSTALLED

    def test_unrelated_error_offers_install(self):
        result = ExecutionResult(exit_code=1, stderr="Traceback (most recent call last)")
        assert programs.classify_aws_cli(result, "aws-cli") == Outcome.NOT_INSTALLED


class TestNodeVersion:
    def test_below_minimum(self):
        assert not programs.node_version_satisfies("v8.9.0", "8.10")

    def test_above_minimum(self):
        assert programs.node_version_satisfies("v9.0.0", "8.10")

    def test_range_minimum(self):
        assert programs.node_version_satisfies("v10.0.0", ">=8.10 <12")

    def test_unusable_minimum_raises(self, verifier, runner):
        runner.set_output("node --version", stdout="v10.0.0\n")

        with pytest.raises(InvalidConstraintError):
            programs.check_node_version(verifier, "latest")

    def test_check_outdated_is_reported(self, verifier, runner, reporter):
        runner.set_output("node --version", stdout="v8.9.0\n")

        report = programs.check_node_version(verifier, "8.10")

        assert report.status == ReportStatus.UNSATISFIED_VERSION
        assert report.detail == "v8.9.0"
        assert reporter.messages("error") == ["Node min version 8.10. Current v8.9.0"]

    def test_check_ok(self, verifier, runner, reporter):
        runner.set_output("node --version", stdout="v18.19.0\n")

        report = programs.check_node_version(verifier, "8.10")

        assert report.installed
        assert reporter.messages("success") == ["Node v18.19.0 is installed"]

    def test_missing_node_never_prompts(self, verifier, runner, prompter):
        runner.set_not_found("node --version")

        report = programs.check_node_version(verifier, "8.10")

        assert report.status == ReportStatus.AUTO_INSTALL_DISABLED
        assert prompter.questions == []


class TestPython:
    PIP = "pip 23.3 from /usr/local/lib/python3.11/site-packages/pip (python 3.11)\n"

    def test_adds_path_and_requires_restart(self, make_verifier, runner, tmp_path: Path):
        profile = tmp_path / ".bash_profile"
        profile.write_text("export FOO=1")
        runner.set_output("pip3 --version", stdout=self.PIP)

        report = programs.check_python(make_verifier(platform=Platform.MACOS, shell_profile=profile), "3.6")

        assert report.installed
        assert report.restart_required
        assert report.detail == "3.11"
        assert profile.read_text() == "export FOO=1\nexport PATH=$PATH:~/Library/Python/3.11/bin\n"

    def test_path_already_present(self, make_verifier, runner, tmp_path: Path):
        profile = tmp_path / ".bash_profile"
        profile.write_text("export PATH=$PATH:~/Library/Python/3.11/bin\n")
        runner.set_output("pip3 --version", stdout=self.PIP)

        report = programs.check_python(make_verifier(platform=Platform.MACOS, shell_profile=profile), "3.6")

        assert report.installed
        assert not report.restart_required

    def test_profile_untouched_off_macos(self, make_verifier, runner, tmp_path: Path):
        profile = tmp_path / ".bash_profile"
        runner.set_output("pip3 --version", stdout=self.PIP)

        report = programs.check_python(make_verifier(shell_profile=profile), "3.6")

        assert report.installed
        assert not profile.exists()

    def test_old_python(self, verifier, runner):
        runner.set_output("pip3 --version", stdout="pip 9.0.1 from /usr/lib/python2.7 (python 2.7)\n")

        report = programs.check_python(verifier, "3.6")

        assert report.status == ReportStatus.UNSATISFIED_VERSION
        assert report.detail == "2.7"

    def test_xcode_tools_missing(self, make_verifier, runner, prompter, reporter):
        runner.set_output(
            "pip3 --version",
            stderr="xcode-select: note: no developer tools were found, requesting install.",
            exit_code=1,
        )
        prompter.confirms.append(False)

        report = programs.check_python(make_verifier(platform=Platform.MACOS), "3.6")

        assert not report.installed
        assert "xcode-select --install" in runner.commands()
        assert "Xcode Developer tools are not installed" in reporter.messages("error")


class TestAwsProfile:
    MISSING = ExecutionResult(exit_code=255, stderr="The config profile (dev) could not be found")

    def test_skipped_without_cli(self, verifier, reporter):
        assert programs.check_aws_profile(verifier, has_aws_cli=False, region="us-west-2") is None
        assert reporter.messages("warn") == ["Skipping AWS profile check."]

    def test_skipped_on_blank_name(self, verifier, prompter, reporter):
        prompter.answers.append("")
        assert programs.check_aws_profile(verifier, has_aws_cli=True, region="us-west-2") is None
        assert reporter.messages("warn") == ["Skipping AWS Profile Check"]

    def test_existing_profile(self, verifier, runner, prompter):
        runner.set_output("aws configure get", stdout="AKIAEXAMPLE\n")

        report = programs.check_aws_profile(
            verifier, has_aws_cli=True, region="us-west-2", profile_name="dev",
        )

        assert report.installed
        assert runner.commands() == ["aws configure get aws_access_key_id --profile dev"]

    def test_setup_runs_one_chained_command(self, verifier, runner, prompter):
        runner.set_response(
            "aws configure get",
            self.MISSING,
            ExecutionResult(stdout="AKIAEXAMPLE\n"),
        )
        prompter.confirms.append(True)
        prompter.answers.extend(["AKIAEXAMPLE", "s3cr3t"])

        report = programs.check_aws_profile(
            verifier, has_aws_cli=True, region="eu-west-1", profile_name="dev",
        )

        assert report.installed
        assert prompter.questions[0] == "Setup dev AWS profile?"
        configure = runner.calls_starting_with("aws configure set")
        assert len(configure) == 1
        chained = configure[0].command
        assert chained.count("aws configure set") == 3
        assert "aws_access_key_id AKIAEXAMPLE --profile dev" in chained
        assert "aws_secret_access_key s3cr3t --profile dev" in chained
        assert "region eu-west-1 --profile dev" in chained

    def test_partial_credentials_change_nothing(self, verifier, runner, prompter, reporter):
        runner.set_response("aws configure get", self.MISSING)
        prompter.confirms.append(True)
        prompter.answers.extend(["AKIAEXAMPLE", ""])

        report = programs.check_aws_profile(
            verifier, has_aws_cli=True, region="us-west-2", profile_name="dev",
        )

        assert not report.installed
        assert report.status == ReportStatus.REMEDIATION_ABORTED
        assert runner.calls_starting_with("aws configure set") == []
        assert "You must provide both an access key and secret key" in reporter.messages("error")

    def test_unexpected_error_is_fatal(self, verifier, runner):
        runner.set_output("aws configure get", stderr="Unable to locate credentials", exit_code=1)

        with pytest.raises(DependencyCheckError):
            programs.check_aws_profile(
                verifier, has_aws_cli=True, region="us-west-2", profile_name="dev",
            )

    def test_access_key_never_reported(self, verifier, runner, prompter):
        runner.set_response(
            "aws configure get",
            self.MISSING,
            ExecutionResult(stdout="AKIASECRETVALUE\n"),
        )
        prompter.confirms.append(True)
        prompter.answers.extend(["AKIASECRETVALUE", "s3cr3t"])

        report = programs.check_aws_profile(
            verifier, has_aws_cli=True, region="us-west-2", profile_name="dev",
        )

        assert report.installed
        assert report.detail == "profile dev configured"
        assert "AKIASECRETVALUE" not in str(report.to_dict())
        configure = runner.calls_starting_with("aws configure set")[0]
        assert configure.redact == ("AKIASECRETVALUE", "s3cr3t")

    def test_profile_name_is_quoted(self, verifier, runner):
        runner.set_output("aws configure get", stdout="AKIAEXAMPLE\n")

        programs.check_aws_profile(
            verifier, has_aws_cli=True, region="us-west-2", profile_name="dev; rm -rf ~",
        )

        assert runner.commands() == [
            "aws configure get aws_access_key_id --profile 'dev; rm -rf ~'",
        ]

    def test_credentials_are_quoted(self, verifier, runner, prompter):
        runner.set_response("aws configure get", self.MISSING, ExecutionResult(stdout="AKIA\n"))
        prompter.confirms.append(True)
        prompter.answers.extend(["AKIA$(id)", "se cret"])

        programs.check_aws_profile(
            verifier, has_aws_cli=True, region="us-west-2", profile_name="dev",
        )

        chained = runner.calls_starting_with("aws configure set")[0].command
        assert "aws_access_key_id 'AKIA$(id)' --profile dev" in chained
        assert "aws_secret_access_key 'se cret' --profile dev" in chained
